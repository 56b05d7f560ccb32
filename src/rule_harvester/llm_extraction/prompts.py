"""
Prompt definitions for policy rule extraction.
"""

NO_RULE_TITLE = "No rule found"
NO_RULE_DESCRIPTION = "This paragraph does not contain an extractable policy rule."

SYSTEM_PROMPT = f"""
Extract policy rules from the given paragraph of a document.
Format your response as a JSON object with the following structure:
{{
  "title": "Short, clear title of the rule",
  "description": "Detailed description that clearly explains the criteria that must be met to match this rule"
}}
Only return the JSON object, nothing else. If there's no clear rule in the paragraph, respond with:
{{
  "title": "{NO_RULE_TITLE}",
  "description": "{NO_RULE_DESCRIPTION}"
}}
"""

# Fixed sampling parameters sent with every request
TEMPERATURE = 0.7
MAX_TOKENS = 2048
TOP_P = 1.0

REQUIRED_FIELDS = ['title', 'description']
