"""
Kuzu repositories for users, grams and comments.

Rows come back from ``KuzuGraphDB.query`` as dicts keyed by the RETURN aliases;
the ``_row_to_*`` helpers turn them into domain models.
"""

import uuid
import logging
from typing import Optional, List, Dict, Any

from ..domain.errors import NotFound, StorageError
from ..domain.models import User, Gram, Comment, now_utc
from ..domain.repositories import UserRepository, GramRepository, CommentRepository
from .kuzu_graph import KuzuGraphDB, get_kuzu_database

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    u.id AS user_id, u.username AS username, u.email AS email,
    u.password_hash AS password_hash, u.active AS active, u.created_at AS user_created_at
"""


def _row_to_user(row: Dict[str, Any]) -> Optional[User]:
    if not row.get('user_id'):
        return None
    return User(
        id=row['user_id'],
        username=row.get('username') or '',
        email=row.get('email') or '',
        password_hash=row.get('password_hash') or '',
        active=row.get('active') is not False,
        created_at=row.get('user_created_at') or now_utc(),
    )


def _row_to_comment(row: Dict[str, Any]) -> Comment:
    user = _row_to_user(row)
    return Comment(
        id=row['comment_id'],
        message=row.get('message') or '',
        gram_id=row.get('gram_id'),
        user_id=user.id if user else None,
        created_at=row.get('created_at') or now_utc(),
        position=row.get('position') or 0,
        user=user,
    )


def _row_to_gram(row: Dict[str, Any]) -> Gram:
    user = _row_to_user(row)
    return Gram(
        id=row['gram_id'],
        message=row.get('message') or '',
        user_id=user.id if user else None,
        created_at=row.get('created_at') or now_utc(),
        updated_at=row.get('updated_at') or now_utc(),
        user=user,
    )


class _KuzuRepository:
    """Resolves the database lazily so one repository works across app instances."""

    def __init__(self, db: Optional[KuzuGraphDB] = None):
        self._db = db

    @property
    def db(self) -> KuzuGraphDB:
        return self._db or get_kuzu_database()


class KuzuUserRepository(_KuzuRepository, UserRepository):
    """User repository backed by Kuzu."""

    def create(self, user: User) -> User:
        if not user.id:
            user.id = str(uuid.uuid4())
        self.db.execute(
            """
            CREATE (u:User {
                id: $id, username: $username, email: $email,
                password_hash: $password_hash, active: $active, created_at: $created_at
            })
            """,
            {
                'id': user.id,
                'username': user.username,
                'email': user.email,
                'password_hash': user.password_hash,
                'active': user.active,
                'created_at': user.created_at,
            },
            operation="user_create",
        )
        logger.info(f"Created user: {user.username} (ID: {user.id})")
        return user

    def _find_one(self, where: str, params: Dict[str, Any], operation: str) -> Optional[User]:
        rows = self.db.query(
            f"MATCH (u:User) WHERE {where} RETURN {_USER_COLUMNS} LIMIT 1",
            params,
            operation=operation,
        )
        return _row_to_user(rows[0]) if rows else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._find_one("u.id = $id", {'id': user_id}, "user_get_by_id")

    def get_by_username(self, username: str) -> Optional[User]:
        return self._find_one("lower(u.username) = lower($username)", {'username': username},
                              "user_get_by_username")

    def get_by_email(self, email: str) -> Optional[User]:
        return self._find_one("lower(u.email) = lower($email)", {'email': email}, "user_get_by_email")

    def list_all(self, limit: int = 100, offset: int = 0) -> List[User]:
        rows = self.db.query(
            f"MATCH (u:User) RETURN {_USER_COLUMNS} ORDER BY u.created_at SKIP {int(offset)} LIMIT {int(limit)}",
            operation="user_list",
        )
        return [user for user in (_row_to_user(row) for row in rows) if user]


class KuzuCommentRepository(_KuzuRepository, CommentRepository):
    """Comment repository backed by Kuzu."""

    def create(self, comment: Comment) -> Comment:
        if not comment.id:
            comment.id = str(uuid.uuid4())
        rows = self.db.query(
            """
            MATCH (u:User {id: $user_id}), (g:Gram {id: $gram_id})
            OPTIONAL MATCH (earlier:Comment)-[:ON_GRAM]->(g)
            WITH u, g, COUNT(earlier) AS earlier_count
            CREATE (c:Comment {id: $id, message: $message, position: earlier_count, created_at: $created_at})
            CREATE (u)-[:WROTE]->(c)
            CREATE (c)-[:ON_GRAM]->(g)
            RETURN c.id AS comment_id, c.position AS position
            """,
            {
                'id': comment.id,
                'message': comment.message,
                'created_at': comment.created_at,
                'user_id': comment.user_id,
                'gram_id': comment.gram_id,
            },
            operation="comment_create",
        )
        if not rows:
            self._raise_missing_parent(comment)
        comment.position = rows[0]['position']
        logger.info(f"Created comment {comment.id} on gram {comment.gram_id}")
        return comment

    def _raise_missing_parent(self, comment: Comment) -> None:
        if not self.db.query_value("MATCH (g:Gram {id: $id}) RETURN COUNT(g)", {'id': comment.gram_id},
                                   operation="comment_gram_exists", default=0):
            logger.info(f"Gram {comment.gram_id} vanished before comment {comment.id} was stored")
            raise NotFound()
        logger.error(f"Comment {comment.id} not stored: no user {comment.user_id}")
        raise StorageError("The comment could not be saved.")

    def list_for_gram(self, gram_id: str) -> List[Comment]:
        rows = self.db.query(
            f"""
            MATCH (u:User)-[:WROTE]->(c:Comment)-[:ON_GRAM]->(g:Gram {{id: $gram_id}})
            RETURN c.id AS comment_id, c.message AS message, c.position AS position,
                   c.created_at AS created_at,
                   g.id AS gram_id, {_USER_COLUMNS}
            ORDER BY c.position, c.created_at
            """,
            {'gram_id': gram_id},
            operation="comment_list_for_gram",
        )
        return [_row_to_comment(row) for row in rows]

    def count(self) -> int:
        return self.db.count_nodes('Comment')


class KuzuGramRepository(_KuzuRepository, GramRepository):
    """Gram repository backed by Kuzu."""

    _SELECT = f"""
        MATCH (u:User)-[:POSTED]->(g:Gram)
        {{where}}
        RETURN g.id AS gram_id, g.message AS message,
               g.created_at AS created_at, g.updated_at AS updated_at, {_USER_COLUMNS}
    """

    def __init__(self, db: Optional[KuzuGraphDB] = None,
                 comment_repo: Optional[KuzuCommentRepository] = None):
        super().__init__(db)
        self.comment_repo = comment_repo or KuzuCommentRepository(db)

    def _with_comments(self, gram: Gram) -> Gram:
        gram.comments = self.comment_repo.list_for_gram(gram.id)
        return gram

    def create(self, gram: Gram) -> Gram:
        if not gram.id:
            gram.id = str(uuid.uuid4())
        rows = self.db.query(
            """
            MATCH (u:User {id: $user_id})
            CREATE (g:Gram {id: $id, message: $message, created_at: $created_at, updated_at: $updated_at})
            CREATE (u)-[:POSTED]->(g)
            RETURN g.id AS gram_id
            """,
            {
                'id': gram.id,
                'message': gram.message,
                'created_at': gram.created_at,
                'updated_at': gram.updated_at,
                'user_id': gram.user_id,
            },
            operation="gram_create",
        )
        if not rows:
            logger.error(f"Gram {gram.id} not stored: no user {gram.user_id}")
            raise StorageError("The gram could not be saved.")
        logger.info(f"Created gram {gram.id} for user {gram.user_id}")
        return gram

    def get_by_id(self, gram_id: str) -> Optional[Gram]:
        rows = self.db.query(
            self._SELECT.format(where="WHERE g.id = $id") + " LIMIT 1",
            {'id': str(gram_id)},
            operation="gram_get_by_id",
        )
        if not rows:
            return None
        return self._with_comments(_row_to_gram(rows[0]))

    def list_all(self) -> List[Gram]:
        rows = self.db.query(
            self._SELECT.format(where="") + " ORDER BY g.created_at DESC, g.id",
            operation="gram_list",
        )
        return [self._with_comments(_row_to_gram(row)) for row in rows]

    def latest(self) -> Optional[Gram]:
        rows = self.db.query(
            self._SELECT.format(where="") + " ORDER BY g.created_at DESC LIMIT 1",
            operation="gram_latest",
        )
        return self._with_comments(_row_to_gram(rows[0])) if rows else None

    def update(self, gram: Gram) -> Gram:
        gram.updated_at = now_utc()
        rows = self.db.query(
            "MATCH (g:Gram {id: $id}) SET g.message = $message, g.updated_at = $updated_at RETURN g.id",
            {'id': gram.id, 'message': gram.message, 'updated_at': gram.updated_at},
            operation="gram_update",
        )
        if not rows:
            raise NotFound()
        logger.info(f"Updated gram {gram.id}")
        return gram

    def delete(self, gram_id: str) -> bool:
        """Remove a gram and its comments together; False when it does not exist."""
        params = {'id': gram_id}
        with self.db.transaction(operation="gram_delete") as tx:
            if not tx.query_value("MATCH (g:Gram {id: $id}) RETURN COUNT(g)", params, default=0):
                return False
            tx.query("MATCH (c:Comment)-[:ON_GRAM]->(g:Gram {id: $id}) DETACH DELETE c", params)
            tx.query("MATCH (g:Gram {id: $id}) DETACH DELETE g", params)
        logger.info(f"Deleted gram {gram_id}")
        return True

    def count(self) -> int:
        return self.db.count_nodes('Gram')
