from typing import List, Optional, Tuple

import PySimpleGUI as sg

from voice_workout.config import APPLICATION_WIDTH, THEME

RECORD_TEXT = "Start Recording"
STOP_TEXT = "Stop Recording"


def create_button(key: str, tooltip: str, text: str, disabled: bool = False) -> sg.Button:
    """
    Create a button element with the given parameters.

    Args:
        key (str): The key of the button.
        tooltip (str): The tooltip of the button.
        text (str): The text of the button.
        disabled (bool, optional): Whether the button starts disabled. Defaults to False.

    Returns:
        sg.Button: The button element.
    """
    return sg.Button(
        button_text=text,
        key=key,
        tooltip=tooltip,
        disabled=disabled,
        size=(18, 2),
    )


def create_text_area(
    text: str = "",
    size: Optional[Tuple[int, int]] = None,
    key: str = "",
    text_color: Optional[str] = None,
) -> sg.Text:
    """
    Create a text area element with the given parameters.

    Args:
        text (str, optional): The text of the text area. Defaults to "".
        size (Optional[Tuple[int, int]], optional): The size of the text area. Defaults to None.
        key (str, optional): The key of the text area. Defaults to "".
        text_color (str, optional): The color of the text. Defaults to None.

    Returns:
        sg.Text: The text area element.
    """
    return sg.Text(
        text=text,
        size=size,
        key=key,
        background_color=sg.theme_background_color(),
        text_color=text_color,
        expand_x=True,
    )


def create_frame(layout: List[List[sg.Element]], title: str = "", key: str = "") -> sg.Frame:
    return sg.Frame(
        title=title,
        layout=layout,
        key=key,
        border_width=1,
        expand_x=True,
        expand_y=True,
    )


def build_layout() -> List[List[sg.Element]]:
    """
    Build the layout: prompt and progress on top, the voice button, the last
    transcript, and the streamed workout plan.

    Returns:
        List[List[sg.Element]]: The layout of the application.
    """
    title = sg.Text("Exercise Snack", font=("Any", 16, "bold"), justification="center")
    error_text = create_text_area(
        size=(APPLICATION_WIDTH, 2), key="-ERROR_TEXT-", text_color="red"
    )
    prompt_text = create_text_area(
        text="Tap the button and answer the prompts",
        size=(APPLICATION_WIDTH, 2),
        key="-PROMPT_TEXT-",
    )
    progress = sg.ProgressBar(
        max_value=100,
        orientation="h",
        size=(APPLICATION_WIDTH // 2, 12),
        key="-PROGRESS-",
    )
    record_button = create_button(
        key="-RECORD_BUTTON-",
        tooltip="Start/Stop recording your answer (R)",
        text=RECORD_TEXT,
    )
    new_workout_button = create_button(
        key="-NEW_WORKOUT_BUTTON-",
        tooltip="Clear the plan and answer the questions again",
        text="Create New Workout",
        disabled=True,
    )
    close_button = create_button(
        key="-CLOSE_BUTTON-", tooltip="Exit the application", text="Close"
    )

    status_text = create_text_area(size=(APPLICATION_WIDTH, 1), key="-STATUS_TEXT-")

    transcript_frame = create_frame(
        title="Your Answers",
        layout=[
            [create_text_area(size=(APPLICATION_WIDTH, 2), key="-TRANSCRIPT_TEXT-")],
            [create_text_area(size=(APPLICATION_WIDTH, 3), key="-ANSWERS_TEXT-")],
        ],
        key="-TRANSCRIPT_FRAME-",
    )
    workout_frame = create_frame(
        title="Your Workout",
        layout=[
            [
                sg.Multiline(
                    key="-WORKOUT_TEXT-",
                    size=(APPLICATION_WIDTH, 20),
                    disabled=True,
                    autoscroll=True,
                    expand_x=True,
                    expand_y=True,
                )
            ]
        ],
        key="-WORKOUT_FRAME-",
    )

    return [
        [sg.Push(), title, sg.Push()],
        [error_text],
        [prompt_text],
        [progress],
        [sg.Push(), record_button, sg.Push()],
        [status_text],
        [transcript_frame],
        [workout_frame],
        [new_workout_button, sg.Push(), close_button],
    ]


def initialize_window() -> sg.Window:
    """
    Initialize the application window.

    Returns:
        sg.Window: The application window.
    """
    sg.theme(THEME)
    window: sg.Window = sg.Window(
        "Exercise Snack",
        build_layout(),
        return_keyboard_events=True,
        use_default_focus=False,
        resizable=True,
        finalize=True,
    )
    return window
