# clubsite_backend/models/__init__.py
# Centralized imports for all database models and schemas

# Teams
from .team_model import Team, TeamInfo

# Competitions and rounds
from .competition_model import Competition, CompetitionFormat, RankLabelColor, Round

# Matches (competition + friendly)
from .match_model import (
    Match, FriendlyMatch, MatchCreate, MatchUpdate,
    FriendlyMatchCreate, FriendlyMatchUpdate, STANDINGS_FIELDS
)

# League tables
from .standing_model import Standing, StandingEdit, StandingsEditRequest

# Public match index
from .match_index_model import PublicMatchIndexRow, PublicMatchIndexMeta
