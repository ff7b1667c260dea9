from app.models.todo import Todo
from app.repositories.base import Repository


class TodoRepository(Repository[Todo]):
    model = Todo

    def list_open_owned_by(self, owner_id: int) -> list[Todo]:
        return self.list_where(Todo.created_by_id == owner_id, Todo.is_closed.is_(False))

    def list_all(self) -> list[Todo]:
        return self.list_where()
