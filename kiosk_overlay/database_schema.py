"""
SQL schema for the kiosk try-on tables.
Run these queries in your Supabase SQL editor.
"""

CREATE_TRYON_SESSIONS_TABLE = """
-- Kiosk try-on sessions (one per customer visit)
CREATE TABLE IF NOT EXISTS tryon_sessions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    store_id UUID NOT NULL REFERENCES stores(id) ON DELETE CASCADE,
    customer_name TEXT,
    customer_phone TEXT,
    captured_images TEXT[],
    detected_body_type TEXT,
    detected_height TEXT,
    detected_skin_tone TEXT,
    favorite_colors TEXT[],
    session_data JSONB,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_tryon_sessions_store_id ON tryon_sessions(store_id);

ALTER TABLE tryon_sessions ENABLE ROW LEVEL SECURITY;

-- Policy: Service role can do everything (for API)
CREATE POLICY tryon_sessions_service_role_all ON tryon_sessions
    FOR ALL
    USING (auth.role() = 'service_role');
"""

CREATE_TRYON_RESULTS_TABLE = """
-- Overlays shown to the customer during a session
CREATE TABLE IF NOT EXISTS tryon_results (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    session_id UUID NOT NULL REFERENCES tryon_sessions(id) ON DELETE CASCADE,
    product_id UUID NOT NULL REFERENCES products(id) ON DELETE CASCADE,
    variant_id UUID REFERENCES product_variants(id) ON DELETE SET NULL,
    result_image_url TEXT,
    ai_comment TEXT,
    match_score INTEGER,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_tryon_results_session_id ON tryon_results(session_id);
CREATE INDEX IF NOT EXISTS idx_tryon_results_product_id ON tryon_results(product_id);

ALTER TABLE tryon_results ENABLE ROW LEVEL SECURITY;

-- Policy: Service role can do everything (for API)
CREATE POLICY tryon_results_service_role_all ON tryon_results
    FOR ALL
    USING (auth.role() = 'service_role');
"""

# Combined setup script
FULL_SCHEMA_SETUP = f"""
-- =====================================================
-- Kiosk Try-On Schema Setup
-- =====================================================
-- Run this in your Supabase SQL Editor
-- =====================================================

{CREATE_TRYON_SESSIONS_TABLE}

{CREATE_TRYON_RESULTS_TABLE}

-- =====================================================
-- Setup Complete!
-- =====================================================
"""

if __name__ == "__main__":
    print(FULL_SCHEMA_SETUP)
