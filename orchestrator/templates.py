"""
Orchestrator - File Templates.

Skeletons written by the `generate` command.
"""

MAP_TEMPLATE = """\
// Map function for the {view} view of {model}.
//
// Called once per stored document. `doc` is the parsed body and
// `meta.id` its key. Call emit(key, value) for every row the view
// should contain. Records carry a "type" field naming their design
// document, which is handy for filtering:
//
//   if (doc.type == "{model}") {{
//     emit(doc.created_at, null);
//   }}

function(doc, meta) {{
  emit(meta.id, null);
}}
"""

REDUCE_TEMPLATE = """\
// Reduce function for the {view} view of {model}.
//
// Leave this file empty (or comments only) to publish the view
// without a reduce step.
//
// Built-in reducers may be used instead of JavaScript:
//
//   _count
//   _sum
//   _stats
//
// A custom reducer must handle rereduce:
//
//   function(key, values, rereduce) {{
//     return sum(values);
//   }}
"""

ENV_TEMPLATE = """\
# docmodel configuration
DOCMODEL_DATABASE_URL=sqlite:///docmodel.db
DOCMODEL_DATABASE_ECHO=false
DOCMODEL_UUID_ALGORITHM=sequential
DOCMODEL_STRONG_RANDOM=false
DOCMODEL_DESIGN_DOCUMENTS_PATHS={paths}
DOCMODEL_HASH_ALGORITHM=md5
DOCMODEL_ENSURE_DESIGN_DOCUMENTS=true
DOCMODEL_LOG_LEVEL=INFO
"""
