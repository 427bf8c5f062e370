# ztex_viewer.py
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from tkinter.scrolledtext import ScrolledText
import logging
import os
from pathlib import Path

from PIL import Image, ImageTk

from ztex_convert import find_textures
from ztex_log import setup_logging
from ztex_settings import Settings
from ZTEX.ztex_errors import ZTEXError
from ZTEX.ztex_header import describe_header, read_ztex_header
from ZTEX.ztex_texture_decoder import ZTEXTextureDecoder

logger = logging.getLogger(__name__)

HEX_DUMP_BYTES = 64
TREE_COLUMNS = (("Name", "File"), ("Format", "Format"), ("Size", "Dimensions"), ("Mipmaps", "Mipmaps"))


def format_hex_dump(data, max_bytes=HEX_DUMP_BYTES):
    max_hex_bytes = min(len(data), max_bytes)
    hex_lines = []
    for i in range(0, max_hex_bytes, 16):
        chunk = data[i:min(i + 16, max_hex_bytes)]
        hex_str = ' '.join(f"{b:02X}" for b in chunk)
        ascii_str = ''.join(chr(b) if 32 <= b <= 126 else '.' for b in chunk)
        hex_lines.append(f"{i:04X}: {hex_str:<48} {ascii_str}")
    if len(data) > max_hex_bytes:
        hex_lines.append("...")
    return "\n".join(hex_lines)


def read_texture_entry(path):
    """Return (path, header, error) for the tree; header is None if it failed to parse."""
    try:
        with open(path, 'rb') as fp:
            return path, read_ztex_header(fp), None
    except (ZTEXError, OSError) as e:
        logger.warning(f"{path}: {e}")
        return path, None, str(e)


class ZTEXViewer:
    def __init__(self, root, settings):
        self.root = root
        self.root.title("ZTEX Viewer")
        self.settings = settings
        self.decoder = ZTEXTextureDecoder(mip_skip_mode=settings.mip_skip_mode)
        self.entries = []
        self.texture_image = None
        self.decoded_image = None
        self.create_widgets()
        self.setup_context_menu()

    def setup_context_menu(self):
        self.context_menu = tk.Menu(self.root, tearoff=0)
        self.context_menu.add_command(label="Export to .png file", command=self.export_selected_texture)
        self.tree.bind("<Button-3>", self.show_context_menu)

    def show_context_menu(self, event):
        item = self.tree.identify_row(event.y)
        if item:
            self.tree.selection_set(item)
            self.context_menu.post(event.x_root, event.y_root)

    def selected_entry(self):
        selection = self.tree.selection()
        if not selection:
            return None
        try:
            return self.entries[int(selection[0])]
        except (ValueError, IndexError):
            return None

    def export_selected_texture(self):
        entry = self.selected_entry()
        if entry is None:
            messagebox.showwarning("Warning", "No texture selected for export")
            return
        path, header, _error = entry
        output_path = filedialog.asksaveasfilename(
            title="Export Texture",
            initialfile=f"{path.stem}.png",
            defaultextension=".png",
            filetypes=(("PNG files", "*.png"), ("All files", "*.*"))
        )
        if not output_path:
            return
        try:
            self.decoder.decode_file(path).to_image().save(output_path)
            messagebox.showinfo("Success", f"Texture successfully exported to:\n{output_path}")
        except (ZTEXError, OSError) as e:
            logger.error(f"Export of {path} failed: {e}")
            messagebox.showerror("Error", f"Failed to export texture:\n{str(e)}")

    def create_widgets(self):
        self.status_label = tk.Label(self.root, text="No textures loaded", font=("Arial", 12, "bold"),
                                     bg="lightgrey", anchor="w", padx=10, pady=5)
        self.status_label.pack(fill=tk.X, padx=5, pady=2)
        main_panel = tk.PanedWindow(self.root, orient=tk.HORIZONTAL)
        main_panel.pack(fill=tk.BOTH, expand=True)
        main_panel.add(self.create_texture_list(main_panel))
        side_panel = tk.PanedWindow(main_panel, orient=tk.VERTICAL)
        main_panel.add(side_panel)
        details_frame = tk.Frame(side_panel)
        side_panel.add(details_frame)
        self.details = ScrolledText(details_frame, height=10)
        self.details.pack(fill=tk.BOTH, expand=True)
        side_panel.add(self.create_preview(side_panel))

    def create_texture_list(self, parent):
        frame = tk.Frame(parent, width=300)
        buttons = tk.Frame(frame)
        buttons.pack(fill=tk.X, padx=5, pady=5)
        for label, command in (("Open TEX File", self.open_file), ("Open Folder", self.open_folder)):
            tk.Button(buttons, text=label, command=command).pack(side=tk.LEFT, expand=True)
        self.tree = ttk.Treeview(frame, columns=[name for name, _title in TREE_COLUMNS], show="headings")
        for name, title in TREE_COLUMNS:
            self.tree.heading(name, text=title)
        self.tree.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)
        self.tree.bind("<<TreeviewSelect>>", self.show_details)
        return frame

    def create_preview(self, parent):
        self.texture_frame = tk.LabelFrame(parent, text="Texture Preview", height=400)
        self.canvas = tk.Canvas(self.texture_frame, bg=self.settings.background)
        scroll_y = tk.Scrollbar(self.texture_frame, orient=tk.VERTICAL, command=self.canvas.yview)
        scroll_x = tk.Scrollbar(self.texture_frame, orient=tk.HORIZONTAL, command=self.canvas.xview)
        scroll_y.pack(side=tk.RIGHT, fill=tk.Y)
        scroll_x.pack(side=tk.BOTTOM, fill=tk.X)
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.canvas.configure(yscrollcommand=scroll_y.set, xscrollcommand=scroll_x.set)
        self.canvas.bind('<Configure>', lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all")))
        return self.texture_frame

    def open_file(self):
        file_path = filedialog.askopenfilename(
            title="Open TEX File",
            initialdir=self.settings.last_directory or None,
            filetypes=(("ZTEX files", "*.tex *.ztex"), ("All files", "*.*"))
        )
        if not file_path:
            return
        self.load_paths(Path(file_path), [Path(file_path)])

    def open_folder(self):
        folder = filedialog.askdirectory(
            title="Open Texture Folder",
            initialdir=self.settings.last_directory or None
        )
        if not folder:
            return
        try:
            paths = find_textures(folder)
        except OSError as e:
            messagebox.showerror("Error", f"Failed to list folder:\n{str(e)}")
            return
        self.load_paths(Path(folder), paths)

    def load_paths(self, source, paths):
        self.settings.last_directory = source if source.is_dir() else source.parent
        self.root.title(f"ZTEX Viewer - {os.path.basename(str(source))}")
        self.populate_tree([read_texture_entry(path) for path in paths])
        broken = sum(1 for _path, header, _error in self.entries if header is None)
        status = f"{len(self.entries)} texture(s)"
        if broken:
            status += f", {broken} unreadable"
        self.status_label.config(text=status)
        logger.info(f"Loaded {status} from {source}")

    def populate_tree(self, entries):
        self.tree.delete(*self.tree.get_children())
        self.entries = entries
        self.canvas.delete("all")
        self.details.delete(1.0, tk.END)
        for i, (path, header, error) in enumerate(self.entries):
            if header is None:
                values = (path.name, "Error", "-", "-")
            else:
                info = header.info
                values = (path.name, info.format.name, f"{info.width}x{info.height}", str(info.mipmaps))
            self.tree.insert("", "end", iid=str(i), values=values)

    def show_details(self, event):
        entry = self.selected_entry()
        if entry is None:
            return
        path, header, error = entry
        self.details.delete(1.0, tk.END)
        self.details.insert(tk.END, f"File: {path}\n")
        if header is None:
            self.details.insert(tk.END, f"Error: {error}\n")
            self.canvas.delete("all")
            self.canvas.create_text(10, 10, text=f"Failed to read header:\n{error}", fill="red", anchor=tk.NW)
        else:
            self.details.insert(tk.END, "\n".join(describe_header(header)) + "\n")
            self.show_texture(path)
        try:
            with open(path, 'rb') as fp:
                head = fp.read(HEX_DUMP_BYTES + 1)
        except OSError as e:
            self.details.insert(tk.END, f"\nFailed to read file: {e}")
            return
        self.details.insert(tk.END, f"\nHex Data (first {HEX_DUMP_BYTES} bytes or less):\n")
        self.details.insert(tk.END, format_hex_dump(head))

    def show_texture(self, path):
        self.canvas.delete("all")
        try:
            decoded = self.decoder.decode_file(path)
        except (ZTEXError, OSError) as e:
            logger.error(f"Failed to decode {path}: {e}")
            self.canvas.create_text(10, 10, text=f"Failed to decode texture:\n{str(e)}", fill="red",
                                    anchor=tk.NW, width=max(self.canvas.winfo_width() - 20, 100))
            return False
        if decoded.width == 0 or decoded.height == 0:
            self.canvas.create_text(50, 50, text="Invalid texture dimensions (0x0).", fill="orange")
            return False
        img = decoded.to_image()
        self.decoded_image = img
        canvas_width = self.texture_frame.winfo_width() - 20
        canvas_height = self.texture_frame.winfo_height() - 20
        if img.width > canvas_width or img.height > canvas_height:
            ratio = min(canvas_width / img.width, canvas_height / img.height)
            if ratio > 0:
                img_display_width = int(img.width * ratio)
                img_display_height = int(img.height * ratio)
                if img_display_width > 0 and img_display_height > 0:
                    img = img.resize((img_display_width, img_display_height), Image.Resampling.LANCZOS)
        self.texture_image = ImageTk.PhotoImage(img)
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.texture_image)
        self.canvas.config(scrollregion=self.canvas.bbox("all"))
        return True

    def on_close(self):
        try:
            self.settings.save()
        except OSError as e:
            logger.warning(f"Failed to save settings to {self.settings.path}: {e}")
        self.root.destroy()


def main():
    settings = Settings().load()
    setup_logging(settings.log_directory, settings.log_level)
    root = tk.Tk()
    app = ZTEXViewer(root, settings)
    root.protocol("WM_DELETE_WINDOW", app.on_close)
    root.geometry("1200x800")
    root.mainloop()


if __name__ == "__main__":
    main()
