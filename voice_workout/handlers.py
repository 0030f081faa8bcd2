from typing import Any, Callable, Dict

import PySimpleGUI as sg
from loguru import logger

from voice_workout.api_client import WorkoutAPIClient
from voice_workout.audio import MicrophoneRecorder
from voice_workout.controller import InterviewController, ViewState
from voice_workout.gui import RECORD_TEXT, STOP_TEXT
from voice_workout.session import Phase

RENDER_EVENT = "-RENDER-"
TASK_DONE_EVENT = "-TASK_DONE-"
RECORD_HOTKEYS = ("r", "R")


class WindowView:
    """
    Forward controller updates to the window event loop.

    Updates may come from a worker thread, so they are posted as events and
    applied by the thread that owns the window.
    """

    def __init__(self, window: sg.Window) -> None:
        self.window = window

    def render(self, state: ViewState) -> None:
        self.window.write_event_value(RENDER_EVENT, state)


def build_controller(window: sg.Window) -> InterviewController:
    def run_in_background(task: Callable[[], None]) -> None:
        window.perform_long_operation(task, TASK_DONE_EVENT)

    return InterviewController(
        view=WindowView(window),
        recorder=MicrophoneRecorder(),
        api=WorkoutAPIClient(),
        run_in_background=run_in_background,
    )


def apply_view_state(window: sg.Window, state: ViewState) -> None:
    """
    Push one controller snapshot into the window elements.

    Args:
        window (sg.Window): The window element.
        state (ViewState): The snapshot to display.
    """
    window["-ERROR_TEXT-"].update(state.error)
    window["-PROMPT_TEXT-"].update(state.prompt)
    window["-PROGRESS-"].update(current_count=int(state.progress))
    window["-STATUS_TEXT-"].update(state.status)
    window["-TRANSCRIPT_TEXT-"].update(state.heard_text)
    window["-ANSWERS_TEXT-"].update(state.answers_text)
    window["-WORKOUT_TEXT-"].update(state.workout_text)
    window["-RECORD_BUTTON-"].update(
        text=STOP_TEXT if state.recording else RECORD_TEXT,
        disabled=state.busy,
    )
    window["-NEW_WORKOUT_BUTTON-"].update(disabled=state.phase is not Phase.DONE)


def handle_events(
    window: sg.Window,
    controller: InterviewController,
    event: str,
    values: Dict[str, Any],
) -> None:
    """
    Handle the events. Toggle recording and redraw after controller updates.

    Args:
        window (sg.Window): The window element.
        controller (InterviewController): The interview flow.
        event (str): The event.
        values (Dict[str, Any]): The values of the window.
    """
    if event is None:
        return

    if event == "-RECORD_BUTTON-" or event in RECORD_HOTKEYS:
        controller.toggle_recording()
    elif event == "-NEW_WORKOUT_BUTTON-":
        controller.new_workout()
    elif event == RENDER_EVENT:
        apply_view_state(window, values[RENDER_EVENT])
    elif event == TASK_DONE_EVENT:
        logger.debug("Background request finished.")


def shutdown(controller: InterviewController) -> None:
    recorder = controller.recorder
    if isinstance(recorder, MicrophoneRecorder) and recorder.recording:
        logger.debug("Releasing microphone...")
        recorder.stop()
    api = controller.api
    if isinstance(api, WorkoutAPIClient):
        api.close()
