"""Code-defined ability behaviors, one module per ability slug.

Modules here are loaded by file name through :class:`bestiary.registry.BehaviorRegistry`.
"""
