"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

NodeID = NewType("NodeID", str)
"""Node identifier assigned by the editor (e.g., 'join-3')"""

# Values a row field may hold. Absence is modelled by omitting the key.
type Scalar = str | int | float | bool | None
