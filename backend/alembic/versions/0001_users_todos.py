from alembic import op
import sqlalchemy as sa

revision = "0001_users_todos"
down_revision = None
branch_labels = None
depends_on = None

def _audit_columns():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_by_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_by_id", sa.Integer(), nullable=False, server_default="0"),
    ]

def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "todos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=150), nullable=True),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
    )
    op.create_index("ix_todos_created_by_id", "todos", ["created_by_id"], unique=False)
    op.create_index("ix_todos_is_closed", "todos", ["is_closed"], unique=False)

def downgrade():
    op.drop_index("ix_todos_is_closed", table_name="todos")
    op.drop_index("ix_todos_created_by_id", table_name="todos")
    op.drop_table("todos")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
