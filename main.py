from typing import Any, Dict, TYPE_CHECKING

from loguru import logger

from voice_workout.utils.display import DisplayNotAvailableError, ensure_display

if TYPE_CHECKING:
    import PySimpleGUI as sg


def main() -> None:
    """
    Main function. Open the window, wire the interview flow, and handle events.
    """
    try:
        ensure_display()
    except DisplayNotAvailableError as exc:
        logger.error(exc)
        logger.info(
            "Run the recorder on a desktop session, or start a virtual display "
            "such as Xvfb first."
        )
        return

    import PySimpleGUI as sg
    from voice_workout.gui import initialize_window
    from voice_workout.handlers import build_controller, handle_events, shutdown

    window: "sg.Window" = initialize_window()
    controller = build_controller(window)
    controller.refresh()
    logger.debug("Application started.")

    while True:
        event: str
        values: Dict[str, Any]
        event, values = window.read()

        if event in ["-CLOSE_BUTTON-", sg.WIN_CLOSED]:
            logger.debug("Closing...")
            break

        handle_events(window, controller, event, values)

    shutdown(controller)
    window.close()


if __name__ == "__main__":
    main()
