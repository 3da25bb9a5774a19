# clubsite_backend/core/exceptions.py
# Domain errors raised by the standings engine and the public match index.
# Routes translate them into HTTPException responses.


class ClubsiteError(Exception):
    """Base class for every domain error in clubsite_backend."""


class CompetitionNotFoundError(ClubsiteError, LookupError):
    """The competition does not exist for the given club."""

    def __init__(self, club_id: str, competition_id: str):
        super().__init__(f"Competition {competition_id} not found for club {club_id}.")
        self.club_id = club_id
        self.competition_id = competition_id


class StandingsNotApplicableError(ClubsiteError, ValueError):
    """
    Raised when standings are requested for a competition format that has none
    (cup competitions). Callers must refuse instead of rendering an empty table.
    """

    def __init__(self, competition_id: str, competition_format: str):
        super().__init__(
            f"Standings are not available for competition {competition_id} "
            f"(format '{competition_format}')."
        )
        self.competition_id = competition_id
        self.competition_format = competition_format


class InvalidIndexKeyError(ClubsiteError, ValueError):
    """A public match index key component is empty, reserved, or holds the delimiter."""


class BatchTooLargeError(ClubsiteError, ValueError):
    """A batch commit carries more operations than the store accepts."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} operations exceeds the store limit of {limit}.")
        self.size = size
        self.limit = limit


class UnsupportedDatabaseError(ClubsiteError, ValueError):
    """The configured database has no merge-upsert support."""

    def __init__(self, dialect: str):
        super().__init__(f"Upserts are not supported on '{dialect}'.")
        self.dialect = dialect
