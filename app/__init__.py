"""
Outer surfaces — command line and Streamlit dashboard.
"""
