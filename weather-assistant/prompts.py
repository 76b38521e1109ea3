SYSTEM_PROMPT = """You are a friendly, concise AI weather assistant embedded in a weather app called WeatherNow.
You have access to the user's current weather data and 5-day forecast.
Give practical, helpful responses about weather conditions, what to wear, activities, travel, \
health impacts, etc.
Keep responses brief (2-4 sentences) and conversational. Use emojis sparingly but naturally.
Never make up weather data — only use the data provided to you."""

INSIGHT_INSTRUCTION = (
    "Give me a 2-3 sentence natural language summary of today's weather and one practical "
    "tip for the day. Be warm and conversational."
)


def chat_turn(context: str, question: str) -> str:
    return f"Current weather data for context:\n{context}\n\nUser question: {question}"


def insight_request(context: str) -> str:
    return f"Here is the current weather data:\n{context}\n\n{INSIGHT_INSTRUCTION}"


NO_WEATHER_PROMPT = "Please search for a city first so I have weather data to work with! 🌍"
EMPTY_QUESTION_PROMPT = "Please type a question about the weather."
CHAT_FAILURE_MESSAGE = "Sorry, I couldn't reach the AI right now. Try again in a moment. ⚡"
INSIGHT_FAILURE_MESSAGE = "AI insight unavailable. You can still ask questions below."
