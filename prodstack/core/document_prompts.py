"""Prompt templates for PRD and user story generation."""

# =============================================================================
# System prompt
# =============================================================================

DOCUMENT_SYSTEM_PROMPT = (
    "You are a senior product manager creating professional product documentation."
)

# =============================================================================
# PRD
# =============================================================================

PRD_SECTIONS = (
    "Executive Summary",
    "Problem Statement",
    "Target Users",
    "Product Goals",
    "Features and Requirements",
    "Success Metrics",
    "Timeline and Milestones",
)

PRD_TITLE_TEMPLATE = "PRD for {workspace_name}"

PRD_USER_PROMPT = """Create a comprehensive Product Requirements Document (PRD) based on the following context:

{context}

The PRD should include:
{sections}

Make it professional, detailed, and well-structured with clear sections."""

# =============================================================================
# User stories
# =============================================================================

USER_STORY_TITLE_TEMPLATE = "User Stories for {workspace_name}"

USER_STORY_USER_PROMPT = """Create detailed user stories based on the following context:

{context}

For each persona, create 3-5 user stories in the format:
"As a [persona], I want [goal] so that [benefit]"

Include:
- Acceptance criteria for each story
- Priority level (High/Medium/Low)
- Estimated effort (Small/Medium/Large)

Organize by persona and make them actionable."""
