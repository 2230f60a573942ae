from database.models import Timeline


def validate_timeline_range(
    parent: Timeline | None, from_year: float, to_year: float
) -> bool:
    """
    Check that a timeline range is well formed and nests inside its parent.

    Bounds are inclusive. For updates the caller passes the parent as stored,
    never one inferred from the edited node.
    """
    if from_year > to_year:
        return False
    if parent is None:
        return True
    return from_year >= parent.from_year and to_year <= parent.to_year
