"""Streamlit side of shinydex: storage backends, session wiring, diagnostics."""
