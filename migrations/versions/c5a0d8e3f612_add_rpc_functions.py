"""add_rpc_functions

Revision ID: c5a0d8e3f612
Revises: 7c2e9f1b5a84
Create Date: 2026-03-04 16:40:19.220871

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c5a0d8e3f612"
down_revision: str | Sequence[str] | None = "7c2e9f1b5a84"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Functions exposed to the API through PostgREST ``/rpc``.

    Both run as the caller (SECURITY INVOKER) so row-level security applies.
    """
    # Where the horse is now: destination of the latest departed movement,
    # or its origin once the horse has come back
    op.execute("""
        CREATE OR REPLACE FUNCTION current_detention_address_id(p_horse UUID)
        RETURNS UUID
        LANGUAGE sql
        STABLE
        SECURITY INVOKER
        SET search_path = public
        AS $$
            SELECT CASE
                WHEN m.return_at IS NOT NULL AND m.return_at <= now() THEN m.from_address_id
                ELSE m.to_address_id
            END
            FROM horse_movements m
            WHERE m.horse_id = p_horse AND m.start_at <= now()
            ORDER BY m.start_at DESC, m.created_at DESC
            LIMIT 1;
        $$;
    """)

    # Address match-or-insert and professional insert in one transaction
    op.execute("""
        CREATE OR REPLACE FUNCTION create_professional_with_address(
            p_professional JSONB,
            p_address JSONB DEFAULT NULL
        )
        RETURNS UUID
        LANGUAGE plpgsql
        SECURITY INVOKER
        SET search_path = public
        AS $$
        DECLARE
            v_uid UUID := auth.uid();
            v_address_id UUID;
            v_professional_id UUID;
        BEGIN
            IF v_uid IS NULL THEN
                RAISE EXCEPTION 'not authenticated' USING ERRCODE = '42501';
            END IF;

            IF p_address IS NOT NULL THEN
                SELECT a.id INTO v_address_id
                FROM addresses a
                WHERE a.created_by = v_uid
                  AND lower(btrim(a.line1)) = lower(btrim(p_address->>'line1'))
                  AND lower(btrim(coalesce(a.line2, ''))) = lower(btrim(coalesce(p_address->>'line2', '')))
                  AND lower(btrim(a.postal_code)) = lower(btrim(p_address->>'postal_code'))
                  AND lower(btrim(a.city)) = lower(btrim(p_address->>'city'))
                  AND lower(btrim(a.country)) = lower(btrim(coalesce(p_address->>'country', 'FR')))
                LIMIT 1;

                IF v_address_id IS NULL THEN
                    INSERT INTO addresses (label, line1, line2, postal_code, city, country, lat, lng, created_by)
                    VALUES (
                        nullif(btrim(p_address->>'label'), ''),
                        btrim(p_address->>'line1'),
                        nullif(btrim(p_address->>'line2'), ''),
                        btrim(p_address->>'postal_code'),
                        btrim(p_address->>'city'),
                        coalesce(nullif(btrim(p_address->>'country'), ''), 'FR'),
                        (p_address->>'lat')::double precision,
                        (p_address->>'lng')::double precision,
                        v_uid
                    )
                    RETURNING id INTO v_address_id;
                END IF;
            END IF;

            INSERT INTO professionals (
                display_name, company_name, kind, email, phone, website, notes,
                address_id, created_by
            )
            VALUES (
                btrim(p_professional->>'display_name'),
                p_professional->>'company_name',
                p_professional->>'kind',
                p_professional->>'email',
                p_professional->>'phone',
                p_professional->>'website',
                p_professional->>'notes',
                v_address_id,
                v_uid
            )
            RETURNING id INTO v_professional_id;

            RETURN v_professional_id;
        END;
        $$;
    """)

    op.execute("GRANT EXECUTE ON FUNCTION current_detention_address_id(UUID) TO authenticated;")
    op.execute(
        "GRANT EXECUTE ON FUNCTION create_professional_with_address(JSONB, JSONB) TO authenticated;"
    )


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS create_professional_with_address(JSONB, JSONB);")
    op.execute("DROP FUNCTION IF EXISTS current_detention_address_id(UUID);")
