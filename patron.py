from __future__ import annotations


class Patron:
    """A registered borrower. Contact details are optional."""

    def __init__(self, id: int, first_name: str, last_name: str,
                 email: str | None = None, phone: str | None = None) -> None:
        self.id = int(id)
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self.email = email
        self.phone = phone

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Patron(id={self.id!r}, name={str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patron):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }

    @staticmethod
    def from_dict(data: dict) -> "Patron":
        return Patron(
            id=data["id"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data.get("email"),
            phone=data.get("phone"),
        )
