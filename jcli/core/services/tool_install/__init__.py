"""
Tool installation — dependency resolution and the install / upgrade /
clean / script executors.

Import from the submodules directly; catalog entries depend on
``subprocess_runner`` so this package stays free of re-exports.
"""
