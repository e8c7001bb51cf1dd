def generate_questions_prompt(role: str, experience: str, skills: str, count: int) -> str:
    """Prompt for the first batch of questions of a new session."""
    return f"""Generate {count} interview questions for a {role} role requiring {experience} experience with these skills: {skills}.
Return as a JSON array where each question has "questionText" and "answer" properties.

Only return the JSON array, no other text."""


def generate_more_questions_prompt(role: str, experience: str, skills: str, count: int) -> str:
    """Prompt for an additional batch of questions on an existing session."""
    return f"""Generate {count} more interview questions about {skills} for a {role} role at {experience} level.
Return as JSON array with "questionText" and "answer" properties.

Only return the JSON array, no other text."""


def explain_question_prompt(question_text: str) -> str:
    """Prompt for a structured long-form explanation of one interview question."""
    return f"""Provide a detailed explanation for the following interview question: "{question_text}".
Include an introduction, key concepts, code examples if applicable, and best practices.
Format the response as a JSON object with the following structure:
{{
  "title": "Title of the explanation",
  "content": "Brief introduction",
  "sections": [
    {{
      "title": "Section 1 Title",
      "content": "Section content with multiple paragraphs",
      "code": "Code example if applicable",
      "points": ["Key point 1", "Key point 2"]
    }},
    {{
      "title": "Section 2 Title",
      "content": "Section content",
      "code": "Another code example",
      "points": ["Key point 3", "Key point 4"]
    }}
  ]
}}

Only return the JSON object, no other text."""


SYSTEM_INSTRUCTIONS = {
    "questions": "You are an experienced technical interviewer who responds only with valid JSON.",
    "explanations": "You are a senior engineer and interview coach who responds only with valid JSON.",
}
