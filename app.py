"""Streamlit launcher: ``streamlit run app.py``.

Re-executes the page module on every rerun, the way Streamlit expects a script to behave.
"""

import runpy

runpy.run_module("weathernow.app", run_name="__main__")
