# kickoff_backend/models/__init__.py
# Centralized imports for all database models and schemas

# Users and sessions
from .user_model import User, UserSession, UserRegister, UserLogin, ProviderLogin, UserRead, LoginResponse

# Teams
from .team_model import Team, TeamCreate, TeamUpdate, TeamRead, TeamSummary

# Matches
from .match_model import (
    Match, MatchStatus, MatchCreate, MatchUpdate, MatchRead, MatchClock,
    LeagueGroup, MatchSchedule
)

# Loans
from .loan_model import Loan, LoanStatus, LoanCreate, LoanUpdate, LoanRead, LoanMatchSummary
