"""Pages and page categories.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Footer / navigation groupings for pages
    op.execute("""
        CREATE TABLE page_categories (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT UNIQUE NOT NULL,
            sort_order INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    # content_json holds the builder's content tree: [{id, layout, components, ...}]
    op.execute("""
        CREATE TABLE pages (
            id SERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            slug TEXT UNIQUE NOT NULL CHECK (slug ~ '^[a-z0-9-]+$'),
            type TEXT NOT NULL DEFAULT 'leecms' CHECK (type IN ('leecms', 'static')),
            content_json JSONB NOT NULL DEFAULT '[]'::jsonb,
            page_category_id INTEGER REFERENCES page_categories(id) ON DELETE SET NULL,
            meta_title TEXT,
            meta_description TEXT,
            is_active BOOLEAN NOT NULL DEFAULT true,
            sort_order INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    op.execute("CREATE INDEX idx_pages_category ON pages(page_category_id);")
    op.execute("CREATE INDEX idx_pages_active_slug ON pages(slug) WHERE is_active;")


def downgrade():
    op.execute("DROP TABLE IF EXISTS pages;")
    op.execute("DROP TABLE IF EXISTS page_categories;")
