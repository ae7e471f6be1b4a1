# dashboard.py (meme viewer for the /give endpoint)
import pandas as pd
import streamlit as st

# import helpers and config
from dashboard_utils import BASE_URL, fetch_json, give_path, PLOTLY_AVAILABLE

# Page config
st.set_page_config(page_title="Meme Viewer", layout="centered", initial_sidebar_state="expanded")

st.title("🐸 Meme Viewer")
st.caption(f"Backend: {BASE_URL}")

# Sidebar controls
st.sidebar.header("Source")
subreddit = st.sidebar.text_input("Subreddit", value="memes")
count = st.sidebar.slider("How many", min_value=1, max_value=100, value=3)
show_spoilers = st.sidebar.checkbox("Show spoilers", value=False)

if st.sidebar.button("Refresh"):
    # drop Streamlit's copy; the API keeps its own 5 minute cache
    fetch_json.clear()

path = give_path(subreddit, count)
st.sidebar.code(path)

resp = fetch_json(path)

if not isinstance(resp, dict) or "error" in resp:
    err = resp.get("error") if isinstance(resp, dict) else resp
    if isinstance(resp, dict) and resp.get("status") == 404:
        st.info(f"No memes found in r/{subreddit}.")
    else:
        st.error(f"Failed to load memes: {err}")
    st.stop()

memes = resp.get("memes", [])
st.subheader(f"{resp.get('count', len(memes))} meme(s) from r/{subreddit}")

# --- Images ---
for meme in memes:
    st.markdown(f"**{meme.get('title', '')}** · u/{meme.get('author', 'unknown')} · ⬆ {meme.get('ups', 0)}")
    if meme.get("spoiler") and not show_spoilers:
        st.caption("Spoiler hidden (enable 'Show spoilers' in the sidebar).")
    elif str(meme.get("url", "")).startswith("https://v.redd.it"):
        st.video(meme["url"])
    else:
        st.image(meme.get("url"), use_container_width=True)
    st.caption(meme.get("postLink", ""))
    st.divider()

# --- Metadata table + upvote chart ---
if memes:
    df = pd.DataFrame(memes)[["title", "author", "subreddit", "ups", "spoiler", "postLink"]]
    with st.expander("Details"):
        st.dataframe(df, use_container_width=True)

    st.subheader("Upvotes")
    if PLOTLY_AVAILABLE:
        import plotly.express as px
        fig = px.bar(df, x="title", y="ups", hover_data=["author"])
        fig.update_layout(xaxis_title="", yaxis_title="ups", xaxis_tickangle=-30)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.bar_chart(df.set_index("title")["ups"])
