#////////////////////////////////////////////////////////////////////////////////#
# File:         streamlit_app.py                                                 #
# Author:       Douglas Nyberg                                                   #
# Email:        douglas1.nyberg@gmail.com                                        #
# Date:         2025-09-12                                                       #
# Description:  Streamlit page for sales prediction.                             #
#////////////////////////////////////////////////////////////////////////////////#
"""
Streamlit page for product sales prediction.

    streamlit run scripts/streamlit_app.py

Upload a sales CSV, pick a product and press Predict to train the regressor
and chart a six month forecast against the actual sales.
"""
import asyncio
import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sales_forecast import config  # noqa: E402
from sales_forecast.exceptions import SalesForecastError  # noqa: E402
from sales_forecast.pipeline import ForecastSession  # noqa: E402

logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT)
logger = logging.getLogger(__name__)

NO_PRODUCT = "Select a product"

st.set_page_config(page_title="Sales Prediction", layout="centered")
st.title("Sales Prediction")

if "forecast_session" not in st.session_state:
    st.session_state["forecast_session"] = ForecastSession()
session: ForecastSession = st.session_state["forecast_session"]

# ===================== Upload =====================
uploaded = st.file_uploader("Upload sales CSV", type=["csv"])
if uploaded is not None:
    upload_id = getattr(uploaded, "file_id", None) or (uploaded.name, uploaded.size)
    if st.session_state.get("uploaded_file_id") != upload_id:
        st.session_state["uploaded_file_id"] = upload_id
        if not session.load_file(uploaded):
            st.warning("Could not parse this file, keeping the previously loaded data.")

# ===================== Product / Predict =====================
if session.products:
    choice = st.selectbox("Product", [NO_PRODUCT] + session.products)
    session.select_product(None if choice == NO_PRODUCT else choice)

predict_clicked = st.button("Predict", disabled=session.records.empty)

chart_placeholder = st.empty()
session.surface.attach(chart_placeholder)

if predict_clicked:
    try:
        with st.spinner(f"Training for {session.epochs} epochs..."):
            asyncio.run(session.predict())
    except SalesForecastError as e:
        logger.error(f"Prediction failed: {e}")
        st.error(str(e))

# ===================== Forecast table =====================
outcome = session.last_outcome
if outcome is not None:
    forecast_df = pd.DataFrame({
        "Month": outcome.forecast.months,
        "Predicted Sales": outcome.forecast.quantities,
    })
    st.subheader(f"Forecast for {outcome.product or 'all products'}")
    st.dataframe(forecast_df, hide_index=True)
    st.download_button(
        "Download Forecast as CSV",
        data=forecast_df.to_csv(index=False),
        file_name="forecast.csv",
        mime="text/csv",
    )
