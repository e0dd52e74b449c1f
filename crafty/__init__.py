"""crafty - install and track ArchCraft packages straight from GitHub."""

__version__ = "0.2.0"
