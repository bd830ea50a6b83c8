import tempfile
from pathlib import Path

import pandas as pd
import streamlit as st

from banglaroll.config import get_config
from banglaroll.persistence import VoterStore
from banglaroll.processors import BatchProcessor
from banglaroll.utils import save_upload

st.set_page_config(page_title="BanglaRoll Voter Search", layout="wide")

st.title("🗳️ BanglaRoll: ভোটার অনুসন্ধান")

config = get_config()

COLUMNS = {
    "serial_number": "ক্রমিক",
    "voter_id": "ভোটার নং",
    "name": "নাম",
    "father_name": "পিতা",
    "mother_name": "মাতা",
    "profession": "পেশা",
    "date_of_birth": "জন্ম তারিখ",
    "address": "ঠিকানা",
    "source_file": "ফাইল",
}


@st.cache_resource
def get_store():
    return VoterStore(config.store_path)


store = get_store()


def to_frame(records):
    if not records:
        return pd.DataFrame(columns=list(COLUMNS.values()))

    df = pd.DataFrame([r.to_dict() for r in records])
    return df[list(COLUMNS)].rename(columns=COLUMNS)


# ------------------------------------------------------------------
# 📥 UPLOAD
# ------------------------------------------------------------------

with st.expander("PDF আপলোড", expanded=store.count() == 0):
    uploads = st.file_uploader(
        "ভোটার তালিকা (PDF)",
        type=["pdf"],
        accept_multiple_files=True,
    )

    if uploads and st.button("প্রক্রিয়া শুরু করুন"):
        with tempfile.TemporaryDirectory() as tmp_dir:
            paths = [
                save_upload(Path(tmp_dir), index, upload.name, upload.getbuffer())
                for index, upload in enumerate(uploads)
            ]

            with st.spinner("Extracting voters..."):
                result = BatchProcessor().process_files(paths)

        saved = store.append(result.records)
        st.success(f"{saved} জন ভোটারের তথ্য সংরক্ষণ করা হয়েছে")

        for name in result.failed_files:
            file_stats = result.file_stats[name]
            st.warning(f"{name}: {file_stats.status} {file_stats.error}")

# ------------------------------------------------------------------
# 🔍 SEARCH
# ------------------------------------------------------------------

st.subheader("Voter Data")

col_search, col_size = st.columns([4, 1])
with col_search:
    search_text = st.text_input(
        "খুঁজুন (নাম, পিতা/মাতার নাম, অথবা ভোটার নম্বরের শেষ ৪-৫ সংখ্যা)",
    )
with col_size:
    size_options = sorted({10, 25, 50, 100, config.storage.default_page_size})
    page_size = st.selectbox(
        "প্রতি পৃষ্ঠায়",
        options=size_options,
        index=size_options.index(config.storage.default_page_size),
    )

total = len(store.search(search_text))
total_pages = max(1, -(-total // page_size))
page = st.number_input("পৃষ্ঠা", min_value=1, max_value=total_pages, value=1, step=1)

paged = store.page(int(page), page_size, search_text)

if search_text:
    st.write(f"**'{search_text}' এর জন্য {paged.total_count} টি ফলাফল**")
else:
    st.write(f"**মোট ভোটার: {paged.total_count}**")

st.dataframe(to_frame(paged.items), use_container_width=True, hide_index=True)
st.caption(f"পৃষ্ঠা {paged.page} / {max(1, paged.total_pages)}")

# ------------------------------------------------------------------
# 🗑️ CLEAR
# ------------------------------------------------------------------

with st.expander("সমস্ত তথ্য মুছুন"):
    confirm = st.checkbox("আমি নিশ্চিত")
    if st.button("মুছে ফেলুন", disabled=not confirm):
        store.clear()
        st.success("সমস্ত তথ্য মুছে ফেলা হয়েছে")
        st.rerun()
