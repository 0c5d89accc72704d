import logging

from openai import AsyncOpenAI, OpenAIError

from models.errors import SummaryError
from models.job import BlogPost
from utils.env import Settings

logger = logging.getLogger("summary_service")

NO_RESULT = "No Result"

SUMMARY_PROMPT = """I am giving you a transcript of church sunday service.
The transcript can contain worship songs, announcements, prayers, etc.
Your job is to analyze the transcript and summarize it into a blog post for the church website.
You should focus on the message and teachings. Write as you are sharing a lecture or teaching.
Try to use the same tone as the original text and copy as much as possible.
You must ignore the worship songs and prayers. If all you have is worship songs and prayers, then simply return "No Result".
Otherwise respond in following format:

Title: [Title of Blog Post]
[Blog content]"""


def parse_post(content: str) -> BlogPost | None:
    """Split a `Title: ...` reply into a BlogPost; None for the no-result reply."""
    content = content.strip()
    if content.startswith("```"):
        content = content.split("```")[1]
        # drop the fence's language tag line, e.g. "markdown"
        tag, _, body = content.partition("\n")
        if not tag.strip() or tag.strip().isalnum():
            content = body
        content = content.strip()
    if not content or content.strip('."').lower() == NO_RESULT.lower():
        return None

    first, _, rest = content.partition("\n")
    if first.lower().startswith("title:"):
        return BlogPost(title=first[len("title:"):].strip(), content=rest.strip())
    return BlogPost(title="", content=content)


class SummaryService:
    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self.model = settings.OPENAI_MODEL
        self.client = client or AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

    async def summarize(self, transcript: str) -> BlogPost | None:
        if not transcript.strip():
            logger.info("Empty transcript, skipping summary")
            return None

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SUMMARY_PROMPT},
                    {"role": "user", "content": transcript},
                ],
                temperature=0.3,
            )
        except OpenAIError as e:
            raise SummaryError(f"summary request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise SummaryError("summary response was empty")

        post = parse_post(response.choices[0].message.content)
        if post is None:
            logger.info("Transcript had no teaching content to summarize")
        else:
            logger.info(f"Summary generated: {post.title!r} ({len(post.content)} chars)")
        return post
