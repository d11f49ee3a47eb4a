"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="User")
class UserSignedUp:
    """A new identity registered locally."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    role = String(required=True)
    signed_up_at = DateTime(required=True)


@commerce.event(part_of="User")
class EarningsCredited:
    """An artist was credited for one order."""

    __version__ = 1

    user_id = Identifier(required=True)
    amount = Integer(required=True)
    earnings = Integer(required=True)
    pending_payout = Integer(required=True)
    total_orders = Integer(required=True)


@commerce.event(part_of="User")
class PayoutRequested:
    """An artist withdrew the pending payout balance."""

    __version__ = 1

    user_id = Identifier(required=True)
    amount = Integer(required=True)
    requested_at = DateTime(required=True)
