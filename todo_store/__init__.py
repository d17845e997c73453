"""todo-store: persistence layer for todos, labels and their associations.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
