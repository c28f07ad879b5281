"""Web interface using Streamlit."""

import streamlit as st

from questionrag import QuestionPipeline, QuestionRagError, WhereFilter
from questionrag.config import config
from questionrag.pipeline import DEFAULT_CONCEPTS, DEFAULT_PROMPT

config.setup_logging()
logger = config.get_logger(__name__)


class SessionState:
    """Centralized session state management."""

    @staticmethod
    def initialize() -> None:
        """Initialize all session state variables."""
        defaults = {
            "pipeline": None,
            "current_answer": None,
            "last_ingestion": None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

    @staticmethod
    def get_pipeline() -> QuestionPipeline:
        """Return the session's pipeline, creating it on first use.

        Returns:
            QuestionPipeline: Pipeline configured from the environment.
        """
        if st.session_state.pipeline is None:
            st.session_state.pipeline = QuestionPipeline.from_config()
        return st.session_state.pipeline


def validate_configuration() -> bool:
    """Validate application configuration.

    Returns:
        bool: True if all credentials are present, False otherwise.
    """
    try:
        config.validate()
    except QuestionRagError:
        return False
    else:
        return True


def create_schema() -> None:
    """Create the question class and report the outcome."""
    try:
        with st.spinner("Creating schema..."):
            SessionState.get_pipeline().setup()
        st.success(f"Class '{config.QUESTION_CLASS}' created.")
    except QuestionRagError as e:
        logger.exception("Schema creation failed")
        st.error(f"Failed to create schema: {e}")


def ingest_dataset(source: str) -> None:
    """Ingest ``source`` and report the outcome."""
    try:
        with st.spinner(f"Ingesting '{source}'..."):
            report = SessionState.get_pipeline().ingest(source or None)
        st.session_state.last_ingestion = report
        st.success(
            f"Ingested {report.objects_sent} objects in {report.flushes} batches."
        )
        if report.failed_objects:
            st.warning(f"{report.failed_objects} objects were rejected.")
    except (QuestionRagError, ValueError) as e:
        logger.exception("Ingestion failed")
        st.error(f"Failed to ingest dataset: {e}")


def render_sidebar() -> None:
    """Render the sidebar with configuration status and setup actions."""
    with st.sidebar:
        st.header("System Configuration")
        config_status = "Valid" if validate_configuration() else "Incomplete"
        st.write(f"**Configuration:** {config_status}")
        st.write(f"**Class:** {config.QUESTION_CLASS}")
        st.write(f"**Chat Model:** {config.CHAT_MODEL}")

        st.divider()
        st.subheader("Setup")
        if st.button("Create Schema", use_container_width=True):
            create_schema()

        source = st.text_input("Dataset file or URL", value=config.DATASET_SOURCE)
        if st.button("Ingest Dataset", use_container_width=True):
            ingest_dataset(source)


def render_query_form() -> None:
    """Render the query inputs and run the query on submit."""
    st.header("Ask About the Questions")
    concepts_text = st.text_input(
        "Concepts (comma separated):",
        value=", ".join(DEFAULT_CONCEPTS),
    )
    prompt = st.text_input("Prompt:", value=DEFAULT_PROMPT)

    col1, col2 = st.columns(2)
    with col1:
        category = st.text_input("Category filter (optional):")
    with col2:
        limit = st.number_input("Limit (0 for none):", min_value=0, value=0, step=1)

    if not st.button("Ask", use_container_width=True):
        return

    concepts = [part.strip() for part in concepts_text.split(",") if part.strip()]
    if not concepts or not prompt.strip():
        st.error("Enter at least one concept and a prompt.")
        return

    category = category.strip()
    where = WhereFilter.equal("category", category) if category else None
    with st.spinner("Processing..."):
        try:
            st.session_state.current_answer = SessionState.get_pipeline().query(
                concepts,
                prompt,
                where=where,
                limit=int(limit) or None,
            )
        except QuestionRagError as e:
            logger.exception("Query failed")
            st.error(f"Failed to process query: {e}")


def render_answer() -> None:
    """Render the last answer and the documents it was based on."""
    answer = st.session_state.current_answer
    if answer is None:
        return

    st.subheader("Answer:")
    st.write(answer.message.content)

    st.subheader(f"Retrieved Documents ({len(answer.results)})")
    for i, record in enumerate(answer.results, start=1):
        with st.expander(f"Document {i} - {record.category}", expanded=False):
            st.markdown(f"**Title:** {record.question}")
            st.write(record.answer)

    if st.checkbox("Show Context (Debug)"):
        st.code(answer.context)


def main() -> None:
    """Main entry point for the Streamlit web application."""
    st.set_page_config(page_title="QuestionRAG", layout="wide")

    SessionState.initialize()

    st.title("QuestionRAG")
    st.markdown("---")

    render_sidebar()
    render_query_form()
    render_answer()


if __name__ == "__main__":
    main()
