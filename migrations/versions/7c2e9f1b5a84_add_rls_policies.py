"""add_rls_policies

Revision ID: 7c2e9f1b5a84
Revises: 4b1d7e2a9c30
Create Date: 2026-03-02 11:02:41.907215

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c2e9f1b5a84"
down_revision: str | Sequence[str] | None = "4b1d7e2a9c30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLES = (
    "profiles",
    "addresses",
    "professionals",
    "horses",
    "interventions",
    "horse_movements",
    "horse_professionals",
)


def upgrade() -> None:
    """Row Level Security for every table.

    The API forwards each caller's access token, so these policies are the
    authorization boundary for reads. Ownership checks in the services give
    clearer errors for writes.
    """
    # SECURITY DEFINER so policies can test the role without recursing into profiles RLS
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

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles: a user sees and writes only their own row; role is not self-assignable ---
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING (id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (id = (SELECT auth.uid()) AND role = 'user');
    """)
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (id = (SELECT auth.uid()))
            WITH CHECK (
                id = (SELECT auth.uid())
                AND role = (SELECT p.role FROM profiles p WHERE p.id = (SELECT auth.uid()))
            );
    """)

    # --- Addresses: readable by authenticated users, written by their creator ---
    op.execute("""
        CREATE POLICY addresses_select ON addresses
            FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY addresses_insert ON addresses
            FOR INSERT WITH CHECK (created_by = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY addresses_update ON addresses
            FOR UPDATE USING (created_by = (SELECT auth.uid()));
    """)

    # --- Professionals: shared directory; creator or admin edits ---
    op.execute("""
        CREATE POLICY professionals_select ON professionals
            FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY professionals_insert ON professionals
            FOR INSERT WITH CHECK (
                created_by = (SELECT auth.uid()) AND is_verified = false
            );
    """)
    op.execute("""
        CREATE POLICY professionals_update ON professionals
            FOR UPDATE USING (
                created_by = (SELECT auth.uid()) OR is_admin((SELECT auth.uid()))
            );
    """)
    op.execute("""
        CREATE POLICY professionals_delete ON professionals
            FOR DELETE USING (
                created_by = (SELECT auth.uid()) OR is_admin((SELECT auth.uid()))
            );
    """)

    # --- Horses: owner only ---
    op.execute("""
        CREATE POLICY horses_owner ON horses
            FOR ALL USING (owner_id = (SELECT auth.uid()))
            WITH CHECK (owner_id = (SELECT auth.uid()));
    """)

    # --- Horse-scoped tables: visible through the owned horse ---
    for table in ("interventions", "horse_movements", "horse_professionals"):
        op.execute(f"""
            CREATE POLICY {table}_by_horse_owner ON {table}
                FOR ALL USING (
                    horse_id IN (SELECT id FROM horses WHERE owner_id = (SELECT auth.uid()))
                )
                WITH CHECK (
                    horse_id IN (SELECT id FROM horses WHERE owner_id = (SELECT auth.uid()))
                );
        """)

    # --- Photo bucket: objects live under the owner's id ---
    op.execute("""
        INSERT INTO storage.buckets (id, name, public)
        VALUES ('horse-photos', 'horse-photos', false)
        ON CONFLICT (id) DO NOTHING;
    """)
    op.execute("""
        CREATE POLICY horse_photos_owner ON storage.objects
            FOR ALL USING (
                bucket_id = 'horse-photos'
                AND (storage.foldername(name))[1] = (SELECT auth.uid())::text
            )
            WITH CHECK (
                bucket_id = 'horse-photos'
                AND (storage.foldername(name))[1] = (SELECT auth.uid())::text
            );
    """)


def downgrade() -> None:
    """Remove the policies and disable RLS."""
    op.execute("DROP POLICY IF EXISTS horse_photos_owner ON storage.objects;")
    for table in ("interventions", "horse_movements", "horse_professionals"):
        op.execute(f"DROP POLICY IF EXISTS {table}_by_horse_owner ON {table};")
    op.execute("DROP POLICY IF EXISTS horses_owner ON horses;")
    for policy in ("select", "insert", "update", "delete"):
        op.execute(f"DROP POLICY IF EXISTS professionals_{policy} ON professionals;")
    for policy in ("select", "insert", "update"):
        op.execute(f"DROP POLICY IF EXISTS addresses_{policy} ON addresses;")
        op.execute(f"DROP POLICY IF EXISTS profiles_{policy} ON profiles;")
    for table in TABLES:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
    op.execute("DROP FUNCTION IF EXISTS is_admin(UUID);")
