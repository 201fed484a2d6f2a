"""add_rls_policies

Revision ID: 7c52e0f18d44
Revises: 4b1d7e2a9c30
Create Date: 2026-03-10 15:03:12.880417

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c52e0f18d44"
down_revision: str | Sequence[str] | None = "4b1d7e2a9c30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add Row Level Security policies.

    Profiles and games are readable by everyone. Users write only their own
    list rows and evaluations; only admins write games.
    """
    # SECURITY DEFINER so policies on games can read profiles.role
    op.execute("""
        CREATE OR REPLACE FUNCTION is_admin(uid UUID)
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT EXISTS (SELECT 1 FROM profiles WHERE id = uid AND role = 'admin');
        $$;
    """)

    for table in ["profiles", "games", "user_game_lists", "evaluations"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles ---
    op.execute("CREATE POLICY profiles_select ON profiles FOR SELECT USING (true);")
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (id = (SELECT auth.uid()));
    """)

    # --- Games ---
    op.execute("CREATE POLICY games_select ON games FOR SELECT USING (true);")
    for action, clause in [
        ("INSERT", "WITH CHECK"),
        ("UPDATE", "USING"),
        ("DELETE", "USING"),
    ]:
        op.execute(f"""
            CREATE POLICY games_{action.lower()} ON games
                FOR {action} {clause} (is_admin((SELECT auth.uid())));
        """)

    # --- Owner-only tables ---
    for table in ["user_game_lists", "evaluations"]:
        op.execute(f"""
            CREATE POLICY {table}_owner ON {table}
                FOR ALL USING (user_id = (SELECT auth.uid()))
                WITH CHECK (user_id = (SELECT auth.uid()));
        """)
    op.execute("CREATE POLICY evaluations_select ON evaluations FOR SELECT USING (true);")


def downgrade() -> None:
    """Remove Row Level Security policies."""
    op.execute("DROP POLICY IF EXISTS evaluations_select ON evaluations;")
    for table in ["user_game_lists", "evaluations"]:
        op.execute(f"DROP POLICY IF EXISTS {table}_owner ON {table};")
    for action in ["insert", "update", "delete", "select"]:
        op.execute(f"DROP POLICY IF EXISTS games_{action} ON games;")
    for action in ["insert", "update", "select"]:
        op.execute(f"DROP POLICY IF EXISTS profiles_{action} ON profiles;")

    for table in ["profiles", "games", "user_game_lists", "evaluations"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS is_admin(UUID);")
