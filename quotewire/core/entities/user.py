"""Authenticated professional profile."""

from quotewire.core.entities.common import WireModel


class UserInfo(WireModel):
    """Profile of the signed-in professional."""

    id: str
    name: str = ""
    email: str = ""
    cnpj: str | None = None
    phone: str | None = None
    avatar: str | None = None
    company_name: str | None = None


class LoginResult(WireModel):
    """Payload returned by the login endpoint."""

    token: str
    user: UserInfo | None = None
