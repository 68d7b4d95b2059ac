"""
Interactive form and result view.

form.py holds the framework-free form state, validation and gateway client;
app.py is the Streamlit page that renders it.
"""
