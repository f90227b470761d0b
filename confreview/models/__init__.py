from confreview.models.bid import Bid, BidStatus
from confreview.models.conference import Conference
from confreview.models.review import Recommendation, Review
from confreview.models.submission import Submission, SubmissionStatus
from confreview.models.submission_coauthor import SubmissionCoAuthor
from confreview.models.track import Track
from confreview.models.user import User
from confreview.models.user_role import Role, RoleName, UserRole

__all__ = [
    "Bid",
    "BidStatus",
    "Conference",
    "Recommendation",
    "Review",
    "Role",
    "RoleName",
    "Submission",
    "SubmissionCoAuthor",
    "SubmissionStatus",
    "Track",
    "User",
    "UserRole",
]
