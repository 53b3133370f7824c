from __future__ import annotations


class Book:
    """Represents a single title in the catalog and how many copies we own."""

    def __init__(self, id: int, title: str, author: str, genre: str, total_copies: int) -> None:
        if total_copies < 0:
            raise ValueError(f"Book {id} cannot have a negative number of copies.")
        self.id = int(id)
        self.title = title.strip()
        self.author = author.strip()
        self.genre = genre.strip()
        self.total_copies = int(total_copies)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.genre})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"Book(id={self.id!r}, title={self.title!r}, total_copies={self.total_copies!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "total_copies": self.total_copies,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            genre=data["genre"],
            total_copies=data["total_copies"],
        )
