"""Domain exceptions raised by the stores and translated by the API layer."""


class TextDiffError(Exception):
    """Base class for all TextDiff Analyzer domain errors."""


class MalformedSnapshot(TextDiffError):
    """Import payload does not have the snapshot shape. State is left unchanged."""


class InvalidReorder(TextDiffError):
    """Requested order is not a permutation of the current text set ids."""


class GroupNotFound(TextDiffError):
    def __init__(self, group_id: str):
        super().__init__(f"Group not found: {group_id}")
        self.group_id = group_id

