from dataclasses import dataclass

from .models import User


@dataclass(frozen=True)
class ActorContext:
    """
    The authenticated caller, passed explicitly into service operations
    instead of being read from request globals.
    """

    user: User
    role: str

    @classmethod
    def from_request(cls, request):
        return cls(user=request.user, role=request.user.role)

    @property
    def user_id(self):
        return self.user.pk

    @property
    def can_administer(self):
        return self.role == User.ROLE_ADMIN

    def owns(self, booking):
        return booking.user_id == self.user.pk
