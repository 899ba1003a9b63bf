"""
Annotator editing core.

Design intent:
- Keep one uncommitted draft per annotation, separate from the saved annotation.
- Commit drafts through injected async services and surface failures as notifications.
- Keep HTTP wiring (annotator.api) thin over the editor modules (annotator.editor).
"""
