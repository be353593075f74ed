from ._saved_variable import SavedVariable
from ._variable import Variable
from ._version_counter import SavedVersionRef, VersionCounter

__all__ = [
    SavedVariable.__name__,
    SavedVersionRef.__name__,
    Variable.__name__,
    VersionCounter.__name__,
]
