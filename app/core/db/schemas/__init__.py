# Import models so Base metadata is aware of them
from .auth import User  # noqa: F401
from .decks import Deck, Card  # noqa: F401
