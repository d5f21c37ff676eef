"""Daily HN Bot - A LINE bot that relays Hacker News stories with AI summaries.

Users talk to the bot in free text. An OpenAI tool call turns the text into a
command, and the bot replies with the latest story, pushes summaries of
selected stories or of an arbitrary URL, or just answers back.

Components:
- main_webhook: FastAPI app (webhook + broadcast routes)
- pipeline: dispatch of verified webhook events
- line: signature verification, event parsing, Messaging API client
- llm: command resolver, language detection, translation
- retrieval: HN story feed and Kagi summarizer
"""
