"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Render the recipe catalog and user query into the ranking prompt.
- Issue the chat-completion call and surface upstream HTTP failures.
"""
