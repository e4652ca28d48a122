#!/usr/bin/env python3
"""
Streamlit entry point.

    streamlit run userdesk/streamlit_app.py
"""
from userdesk.main import main

main()
