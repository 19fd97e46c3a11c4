"""Client (customer) entities."""

from datetime import datetime

from quotewire.core.entities.common import WireModel


class Client(WireModel):
    """A customer of the professional."""

    id: str | None = None
    full_name: str
    phone: str
    email: str | None = None
    cpf_cnpj: str | None = None
    requires_invoice: bool = False
    public_link: str | None = None
    cep: str = ""
    street: str = ""
    number: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    total_value: float = 0.0
    client_since: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClientStats(WireModel):
    """Aggregate client figures for the dashboard."""

    total_clients: int = 0
    total_value: float = 0.0
    recent_clients: int = 0
    active_projects: int = 0
