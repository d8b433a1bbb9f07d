# common_header.py
import streamlit as st


def top_nav(title: str, hide_sidebar=True, title_size="1.6rem"):
    st.set_page_config(page_title=title, layout="wide",
                       initial_sidebar_state="collapsed")
    if hide_sidebar:
        st.markdown("<style>[data-testid='stSidebar']{display:none;}</style>", unsafe_allow_html=True)

    st.markdown(f"""
    <style>
      .block-container {{ max-width:1200px; padding: 1.9rem .8rem 1rem; }}
      .stApp h1, h1 {{ font-size:{title_size} !important; font-weight:800 !important; }}
      .stSelectbox, .stRadio, .stNumberInput {{ margin-bottom:.25rem; }}
      [data-testid="stHorizontalBlock"] {{ gap:.6rem !important; }}
    </style>
    """, unsafe_allow_html=True)
