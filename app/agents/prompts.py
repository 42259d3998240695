"""Prompt templates for the script generation agents."""

from langchain_core.prompts import ChatPromptTemplate

FEASIBILITY_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You review requests for small Python command-line applications. "
            "A request is feasible when its functionality is clear and can be "
            "implemented in a single Python file using only the standard library. "
            "Answer with exactly one word: YES if the request is feasible, NO otherwise.",
        ),
        ("human", "Requirements:\n{requirements}"),
    ]
)

GENERATION_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You are an experienced Python developer. Write a complete, runnable "
            "Python CLI application in a single file that implements the given "
            "requirements. Use argparse for arguments and include a main guard. "
            "Reply with the code only, without explanations.",
        ),
        ("human", "Requirements:\n{requirements}"),
    ]
)

VERIFICATION_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You verify Python scripts. Check that the script is valid Python, "
            "runs as a command-line application and implements every requirement. "
            "Answer with exactly one word: YES if the script is acceptable, NO otherwise.",
        ),
        ("human", "Requirements:\n{requirements}\n\nScript:\n```python\n{script}\n```"),
    ]
)

REWRITE_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "A script generated from the requirements below was rejected during "
            "verification. Rewrite the requirements so that they are precise, "
            "unambiguous and keep the original intent, making it easier to produce "
            "a correct single-file Python CLI. Reply with the rewritten requirements only.",
        ),
        (
            "human",
            "Requirements:\n{requirements}\n\nRejected script:\n```python\n{script}\n```",
        ),
    ]
)
