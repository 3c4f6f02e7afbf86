"""
Streamlit UI for LED display quotations.

Features:
- Product, tier, size and controller selection in the sidebar
- Section A / B / C preview with GST and grand total
- Pricing trace and provisional-price warnings
- Plain-text quotation download
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from led_quote.config.settings import get_settings
from led_quote.data.catalog import CatalogStore
from led_quote.engine import BuyerTier, CabinetGrid, DisplayRequest, PricingEngine, PricingError, PricingOverride
from led_quote.services.document_renderer import format_inr, render_quotation
from led_quote.ui.preview import preview_rows


st.set_page_config(
    page_title="LED Quotation Builder",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_catalog_store():
    """Get cached catalog store."""
    settings = get_settings()
    return CatalogStore.from_files(settings.products_csv, settings.controllers_csv)


try:
    settings = get_settings()
    store = get_catalog_store()
    catalog = store.snapshot()
except (FileNotFoundError, ValueError) as e:
    st.error(f"Catalog Error: {e}")
    st.stop()

engine = PricingEngine(catalog, settings.constants)


# ============================================================================
# SIDEBAR: Configuration
# ============================================================================
with st.sidebar:
    st.header("📺 Display")

    products = sorted(catalog.products.values(), key=lambda p: (p.category, p.name))
    labels = {f"{p.name} | {p.category}": p.id for p in products}
    selected_label = st.selectbox("Product", options=list(labels))
    product = catalog.get_product(labels[selected_label])

    tier = st.radio("Pricing", options=list(BuyerTier), format_func=lambda t: t.display_name)

    c1, c2 = st.columns(2)
    width_mm = c1.number_input("Width (mm)", min_value=0.0, value=1920.0, step=10.0)
    height_mm = c2.number_input("Height (mm)", min_value=0.0, value=1080.0, step=10.0)

    grid = None
    if product.is_rental:
        st.caption("Rental displays are priced per cabinet.")
        g1, g2 = st.columns(2)
        columns = g1.number_input("Columns", min_value=1, value=2, step=1)
        rows = g2.number_input("Rows", min_value=1, value=1, step=1)
        grid = CabinetGrid(int(columns), int(rows))

    controller = None
    if not product.is_jumbo:
        options = ["(none)"] + sorted(catalog.controllers)
        choice = st.selectbox("Controller", options=options)
        controller = None if choice == "(none)" else choice

    st.divider()
    override = None
    with st.expander("🔧 Custom Structure / Installation"):
        use_override = st.checkbox("Override structure and installation prices")
        if use_override:
            structure = st.number_input("Structure price", min_value=0.0, value=0.0, step=1000.0)
            installation = st.number_input("Installation price", min_value=0.0, value=0.0, step=100.0)
            mode = st.radio("Installation pricing", options=["fixed", "per_sqft"], horizontal=True)
            override = PricingOverride(structure, installation, mode)


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("LED Quotation Builder")
st.caption(f"v1.0 | Catalog {catalog.source_hash[:8] or 'in-memory'} | {datetime.now().strftime('%Y-%m-%d')}")

request = DisplayRequest(
    width_mm=width_mm,
    height_mm=height_mm,
    buyer_tier=tier,
    cabinet_grid=grid,
    controller=controller,
    override=override,
    product_id=product.id,
)

try:
    breakdown = engine.calculate(request)
except PricingError as e:
    st.error(f"Cannot price this configuration: {e}")
    st.stop()

m1, m2, m3 = st.columns(3)
m1.metric("Grand Total", format_inr(breakdown.grand_total, 0))
m2.metric("Quantity", f"{breakdown.quantity:g} {breakdown.quantity_unit}")
m3.metric("Screen Area", f"{breakdown.area_sqft:g} sq ft")

if breakdown.degraded:
    st.warning(
        "Provisional quotation: no catalog price for "
        + ", ".join(breakdown.unresolved_fields)
        + ". Fallback pricing was used."
    )
for warning in breakdown.warnings:
    st.caption(f"⚠️ {warning}")

st.dataframe(pd.DataFrame(preview_rows(breakdown)), use_container_width=True, hide_index=True)

with st.expander("🔍 Pricing Trace"):
    st.text(breakdown.get_trace_text())

st.download_button(
    "📥 Download Quotation",
    data=render_quotation(breakdown),
    file_name=f"quotation_{product.id}.txt",
    mime="text/plain",
)
