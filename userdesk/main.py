# userdesk/main.py
import logging

import streamlit as st

from userdesk.ui.user_table import get_controller, render_user_table
from userdesk.utils.config import Config
from userdesk.utils.helpers import setup_logging

# Initialize logging first
setup_logging()

__all__ = ['initialize_session_state', 'setup_page_config', 'main']


def initialize_session_state():
    """Initialize Streamlit session state variables"""
    if 'config_validated' not in st.session_state:
        logging.info(f"Configuration: {Config.to_dict()}")
        st.session_state['config_validated'] = Config.validate()
    get_controller()


def setup_page_config():
    """Set up the Streamlit page configuration"""
    st.set_page_config(
        page_title=Config.PAGE_TITLE,
        page_icon=Config.FAVICON_URL,
        layout="wide",
    )


def main():
    """Main application entry point"""
    setup_page_config()
    try:
        initialize_session_state()
        render_user_table()
    except Exception as e:
        st.error(f"An error occurred: {str(e)}")
        logging.error(f"Application error: {str(e)}", exc_info=True)


if __name__ == "__main__":
    main()
