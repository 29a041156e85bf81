# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan App - Main Application Window
=======================================

customtkinter UI with:
- Allergen keyword entry and chips
- Start/Stop scanning toggle
- Live camera preview with the match overlay blended on top
- Warning panel listing the allergens found in the last scan
- Optional debug panel fed by the diagnostics channel

Architecture:
- Main Thread: all Tk calls; polls session state with ``after``
- Camera Thread: CameraStream keeps the latest frame
- Scan Thread: ScanSession runs OCR every few seconds
"""

import threading
from collections import deque
from tkinter import messagebox
from typing import Optional

import cv2
import customtkinter as ctk
from PIL import Image

from allerscan.camera import CameraStream
from allerscan.ocr import TesseractEngine
from allerscan.overlay import OverlayRenderer
from allerscan.scanner import KeywordStore, ScanSession
from allerscan.utils import CameraError, Config, DiagnosticChannel, DiagnosticEvent, get_logger


# Configure appearance
ctk.set_appearance_mode("dark")
ctk.set_default_color_theme("blue")

PREVIEW_SIZE = (640, 360)
UI_REFRESH_MS = 42  # ~24 FPS preview
DEBUG_LINES = 12


class AllergenListPanel(ctk.CTkFrame):
    """Keyword entry, Add button and the list of current keywords."""

    def __init__(self, parent, keywords: KeywordStore):
        super().__init__(parent)
        self.keywords = keywords
        self._shown_version = -1

        entry_row = ctk.CTkFrame(self, fg_color="transparent")
        entry_row.pack(fill="x", padx=10, pady=(10, 5))

        self.entry = ctk.CTkEntry(entry_row, placeholder_text="Add allergy (e.g. peanut)")
        self.entry.pack(side="left", fill="x", expand=True, padx=(0, 8))
        self.entry.bind("<Return>", lambda e: self._add())

        ctk.CTkButton(entry_row, text="Add", width=80, command=self._add).pack(side="right")

        self.chips = ctk.CTkLabel(self, text="", anchor="w", justify="left", wraplength=600, text_color="#ff8a8a")
        self.chips.pack(fill="x", padx=12, pady=(0, 10))

        self.refresh()

    def _add(self):
        if self.keywords.add(self.entry.get()) is not None:
            self.entry.delete(0, "end")
        self.refresh()

    def refresh(self):
        version = self.keywords.version
        if version == self._shown_version:
            return
        self._shown_version = version
        keywords = self.keywords.snapshot()
        self.chips.configure(text="  ".join(f"[{k}]" for k in keywords) if keywords else "No allergens added yet")


class WarningPanel(ctk.CTkFrame):
    """Red panel shown only while allergens are detected."""

    def __init__(self, parent):
        super().__init__(parent, border_width=2, border_color="#d32f2f")
        ctk.CTkLabel(
            self,
            text="Warning: Allergens Found!",
            font=ctk.CTkFont(size=18, weight="bold"),
            text_color="#ef5350",
        ).pack(anchor="w", padx=12, pady=(8, 2))
        self.items = ctk.CTkLabel(self, text="", anchor="w", justify="left")
        self.items.pack(anchor="w", padx=20, pady=(0, 8))
        self._visible = False
        self._shown: tuple = ()

    def update_allergens(self, allergens: tuple, **pack_kwargs):
        if allergens == self._shown and bool(allergens) == self._visible:
            return
        self._shown = allergens

        if allergens:
            self.items.configure(text="\n".join(f"• {a}" for a in allergens))
            if not self._visible:
                self.pack(**pack_kwargs)
                self._visible = True
        elif self._visible:
            self.pack_forget()
            self._visible = False


class AllerScanApp(ctk.CTk):
    """
    Main AllerScan Application.

    Owns the keyword store, the camera and the scan session and wires them
    to the widgets.
    """

    def __init__(self, config: Optional[Config] = None, show_debug: bool = False):
        super().__init__()

        self.logger = get_logger("allerscan.app")
        self.config_model = config or Config()

        # Window config
        self.title("Allergy Scanner (AR)")
        self.geometry("760x860")
        self.minsize(700, 700)

        # Core components
        self.keywords = KeywordStore(self.config_model.allergens)
        self.diagnostics = DiagnosticChannel()
        self.renderer = OverlayRenderer.from_config(self.config_model.overlay)
        self.camera: Optional[CameraStream] = None
        self.session = ScanSession(
            recognizer=TesseractEngine.from_config(self.config_model.scan),
            keywords=self.keywords,
            frame_source=self._current_frame,
            renderer=self.renderer,
            interval=self.config_model.scan.interval,
            diagnostics=self.diagnostics,
        )

        # Debug lines arrive on the scan thread; the UI drains them
        self._debug_lines: deque = deque(maxlen=DEBUG_LINES)
        self._debug_lock = threading.Lock()
        self._debug_dirty = False
        self._show_debug = show_debug
        if show_debug:
            self.diagnostics.subscribe(self._on_diagnostic)

        self._build_ui()

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.after(UI_REFRESH_MS, self._update_ui)

    def _build_ui(self):
        """Build the main UI."""
        ctk.CTkLabel(
            self,
            text="Allergy Scanner (AR)",
            font=ctk.CTkFont(size=24, weight="bold"),
        ).pack(anchor="w", padx=20, pady=(15, 5))

        self.allergen_panel = AllergenListPanel(self, self.keywords)
        self.allergen_panel.pack(fill="x", padx=15, pady=5)

        # Shown while the camera is off; image=None does not clear a CTkLabel
        blank = Image.new("RGB", PREVIEW_SIZE)
        self._blank_preview = ctk.CTkImage(light_image=blank, dark_image=blank, size=PREVIEW_SIZE)

        self.video_label = ctk.CTkLabel(self, text="Camera is off", width=PREVIEW_SIZE[0], height=PREVIEW_SIZE[1])
        self.video_label.pack(padx=15, pady=10)

        self.scan_btn = ctk.CTkButton(
            self,
            text="Start Scanning",
            command=self._toggle_scanning,
            width=160,
            height=38,
            fg_color="#2b7a0b",
            hover_color="#1e5a08",
        )
        self.scan_btn.pack(anchor="w", padx=15, pady=5)

        self.warning_panel = WarningPanel(self)

        if self._show_debug:
            self.debug_box = ctk.CTkTextbox(self, height=160, font=ctk.CTkFont(family="Courier", size=11))
            self.debug_box.pack(side="bottom", fill="x", padx=15, pady=10)
            self.debug_box.configure(state="disabled")

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _current_frame(self):
        camera = self.camera
        return camera.latest_frame() if camera else None

    def _toggle_scanning(self):
        if self.session.is_scanning:
            self._stop_scanning()
        else:
            self._start_scanning()

    def _start_scanning(self):
        """Open the camera and start the scan loop."""
        self.camera = CameraStream.from_config(self.config_model.camera)
        try:
            self.camera.start()
        except CameraError as e:
            self.logger.error(f"Failed to start camera: {e}")
            self.camera = None
            messagebox.showerror("Camera Error", str(e))
            return

        self.session.start()
        self.scan_btn.configure(text="Stop Scanning", fg_color="#a51d2d", hover_color="#8a1829")

    def _stop_scanning(self):
        """Stop the scan loop and release the camera."""
        self.session.stop()
        if self.camera:
            self.camera.stop()
            self.camera = None

        self.video_label.configure(image=self._blank_preview, text="Camera is off")
        self.scan_btn.configure(text="Start Scanning", fg_color="#2b7a0b", hover_color="#1e5a08")

    # ------------------------------------------------------------------
    # UI refresh (main thread)
    # ------------------------------------------------------------------

    def _update_ui(self):
        try:
            self.allergen_panel.refresh()
            self.warning_panel.update_allergens(
                self.session.detected_allergens, fill="x", padx=15, pady=5, after=self.scan_btn
            )
            self._update_preview()
            self._drain_debug()
        except Exception as e:
            self.logger.error(f"Error in UI update: {e}")

        self.after(UI_REFRESH_MS, self._update_ui)

    def _update_preview(self):
        if self.camera is None:
            return
        if not self.camera.is_running:
            # Reader gave up after repeated failures
            self.logger.warning("Camera stopped delivering frames; stopping scan")
            self._stop_scanning()
            return

        frame = self.camera.latest_frame()
        if frame is None:
            return

        composed = self.renderer.composite(frame)
        rgb = cv2.cvtColor(composed, cv2.COLOR_BGR2RGB)
        image = Image.fromarray(rgb)
        ctk_img = ctk.CTkImage(light_image=image, dark_image=image, size=PREVIEW_SIZE)
        self.video_label.configure(image=ctk_img, text="")

    def _on_diagnostic(self, event: DiagnosticEvent):
        with self._debug_lock:
            self._debug_lines.append(f"{event.level_name[:4]} {event.message}")
            self._debug_dirty = True

    def _drain_debug(self):
        if not self._show_debug:
            return
        with self._debug_lock:
            if not self._debug_dirty:
                return
            text = "\n".join(self._debug_lines)
            self._debug_dirty = False

        self.debug_box.configure(state="normal")
        self.debug_box.delete("1.0", "end")
        self.debug_box.insert("end", text)
        self.debug_box.configure(state="disabled")

    def _on_close(self):
        """Handle window close."""
        self._stop_scanning()
        self.destroy()


def main(config: Optional[Config] = None, show_debug: bool = False):
    """Entry point for the AllerScan application."""
    app = AllerScanApp(config, show_debug=show_debug)
    app.mainloop()


if __name__ == "__main__":
    main()
