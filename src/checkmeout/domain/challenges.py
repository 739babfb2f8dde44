"""Catalog of daily challenges."""

from dataclasses import dataclass

from checkmeout.domain.models import ActivityType


@dataclass(frozen=True)
class Challenge:
    """Named achievable task that awards bonus points once."""

    title: str
    description: str
    activity_type: ActivityType


POST_A_SCAN = "Post a scan of yourself"
GYM_PICTURE = "Take a picture at the gym"
SHAME_A_FRIEND = "Shame a friend"
LOG_A_MEAL = "Log a meal"
RESPOND_TO_FRIEND = "Respond to a friend's post"

CHALLENGES: tuple[Challenge, ...] = (
    Challenge(
        title=POST_A_SCAN,
        description="Take a body scan and share it with your friends",
        activity_type=ActivityType.BODY_CHECK,
    ),
    Challenge(
        title=GYM_PICTURE,
        description="Show off your workout routine",
        activity_type=ActivityType.WORKOUT,
    ),
    Challenge(
        title=SHAME_A_FRIEND,
        description="Tag a friend who missed their workout",
        activity_type=ActivityType.SHAMED,
    ),
    Challenge(
        title=LOG_A_MEAL,
        description="Take a photo of your healthy meal",
        activity_type=ActivityType.MEAL,
    ),
    Challenge(
        title=RESPOND_TO_FRIEND,
        description="Roast a friend's latest post",
        activity_type=ActivityType.ROAST,
    ),
)


def find_challenge(title: str) -> Challenge | None:
    """Return the catalog entry for a title, if any."""
    for challenge in CHALLENGES:
        if challenge.title == title:
            return challenge
    return None
