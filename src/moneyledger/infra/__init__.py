"""Reference persistence collaborator built on SQLModel."""
