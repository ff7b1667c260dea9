from app.models.user import User
from app.repositories.base import Repository


class UserRepository(Repository[User]):
    model = User

    def find_by_username(self, username: str) -> User | None:
        return self.find_by(username=username)
