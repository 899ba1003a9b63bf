"""
API boundary for the annotator editor.

Design intent:
- Expose draft editing and save operations over HTTP.
- Keep handlers thin and delegate rules to annotator.editor.
"""
