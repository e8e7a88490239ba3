"""HTML report generator — a self-contained page with an in-page image viewer."""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from urllib.parse import quote

from visual_diff.comparer.image_comparer import ComparisonResult
from visual_diff.models.comparison import ScannedFile
from visual_diff.models.config import HTML_REPORT_FILENAME, IMAGES_DIRNAME

from .summary import ReportSummary, summarize

logger = logging.getLogger(__name__)


def _image_src(path: Path) -> str:
    return quote(f"{IMAGES_DIRNAME}/{path.name}")


def _status_banner(summary: ReportSummary) -> str:
    if summary.failed:
        return ('<div class="status fail" role="status">'
                '<span class="status-icon" aria-hidden="true">&#10007;</span> FAILED</div>')
    return ('<div class="status pass" role="status">'
            '<span class="status-icon" aria-hidden="true">&#10003;</span> PASSED</div>')


def _stat(value: int, label: str, css_class: str = "") -> str:
    cls = f"stat {css_class}".strip()
    return f'<div class="{cls}"><div class="value">{value}</div><div class="label">{label}</div></div>'


def _build_trigger(row: int, col: int, name: str, role: str, path: Path) -> str:
    """A button that opens one image in the lightbox."""
    src = _image_src(path)
    caption = html.escape(f"{name} — {role}")
    return f'''
        <figure class="diff-figure">
          <button type="button" class="lightbox-trigger" data-row="{row}" data-col="{col}" data-src="{src}" data-caption="{caption}" aria-label="View {html.escape(role.lower())} image of {html.escape(name)}">
            <img src="{src}" alt="{caption}" loading="lazy"/>
          </button>
          <figcaption>{role}</figcaption>
        </figure>'''


def _group_images(r: ComparisonResult) -> list[tuple[str, Path]]:
    paths = r.pair.output_paths
    images = [("Baseline", paths.baseline), ("Candidate", paths.candidate)]
    if not r.dimension_mismatch:
        images.append(("Diff", paths.diff))
    return images


def _build_diff_group(row: int, r: ComparisonResult) -> str:
    """Build the card for one differing pair. ``row`` is its lightbox grid row."""
    name = r.pair.name
    images = _group_images(r)
    note = ""
    if r.dimension_mismatch:
        note = (f'<div class="mismatch-note">&#9888; Dimension mismatch: '
                f'{html.escape(r.dimension_mismatch.baseline)} → '
                f'{html.escape(r.dimension_mismatch.candidate)}</div>')

    triggers = "".join(
        _build_trigger(row, col, name, role, path) for col, (role, path) in enumerate(images)
    )
    return f'''
    <section class="diff-group" id="diff-{row}">
      <div class="diff-header">
        <strong>{html.escape(name)}</strong>
        <span class="badge fail">{r.diff_percentage:.2f}%</span>
      </div>
      {note}
      <div class="diff-images">{triggers}
      </div>
    </section>'''


def _build_file_list(title: str, names: list[str], css_class: str) -> str:
    if not names:
        return ""
    items = "".join(f"<li><code>{html.escape(n)}</code></li>" for n in names)
    return f'<div class="file-list {css_class}"><h2>{title} ({len(names)})</h2><ul>{items}</ul></div>'


LIGHTBOX_HTML = '''
<div class="lightbox" id="lightbox" role="dialog" aria-modal="true" aria-label="Image viewer" hidden>
  <button type="button" class="lightbox-close" id="lightbox-close" aria-label="Close image viewer">&times;</button>
  <button type="button" class="lightbox-nav lightbox-prev" id="lightbox-prev" aria-label="Previous image">&#8249;</button>
  <figure class="lightbox-body">
    <img id="lightbox-image" src="" alt=""/>
    <figcaption><span id="lightbox-caption"></span> <span class="lightbox-counter" id="lightbox-counter" aria-live="polite"></span></figcaption>
  </figure>
  <button type="button" class="lightbox-nav lightbox-next" id="lightbox-next" aria-label="Next image">&#8250;</button>
</div>'''

LIGHTBOX_SCRIPT = '''
<script>
(function () {
  var triggers = Array.prototype.slice.call(document.querySelectorAll('.lightbox-trigger'));
  var nav = JSON.parse(document.getElementById('lightbox-nav').textContent);
  var box = document.getElementById('lightbox');
  var img = document.getElementById('lightbox-image');
  var caption = document.getElementById('lightbox-caption');
  var counter = document.getElementById('lightbox-counter');
  var closeBtn = document.getElementById('lightbox-close');
  var prevBtn = document.getElementById('lightbox-prev');
  var nextBtn = document.getElementById('lightbox-next');
  var current = null;
  var opener = null;

  function show(index) {
    var t = triggers[index];
    current = index;
    img.src = t.dataset.src;
    img.alt = t.dataset.caption;
    caption.textContent = t.dataset.caption;
    counter.textContent = (index + 1) + ' of ' + triggers.length;
    prevBtn.disabled = nav[index].prev === null;
    nextBtn.disabled = nav[index].next === null;
  }

  function open(index) {
    opener = triggers[index];
    box.hidden = false;
    document.body.classList.add('lightbox-open');
    show(index);
    closeBtn.focus();
  }

  function close() {
    box.hidden = true;
    document.body.classList.remove('lightbox-open');
    current = null;
    if (opener) { opener.focus(); }
  }

  function go(move) {
    var target = nav[current][move];
    if (target !== null) { show(target); }
  }

  triggers.forEach(function (t, index) {
    t.addEventListener('click', function () { open(index); });
  });
  closeBtn.addEventListener('click', close);
  prevBtn.addEventListener('click', function () { go('prev'); });
  nextBtn.addEventListener('click', function () { go('next'); });
  box.addEventListener('click', function (e) { if (e.target === box) { close(); } });

  document.addEventListener('keydown', function (e) {
    if (current === null) { return; }
    switch (e.key) {
      case 'Escape': close(); break;
      case 'ArrowLeft':
      case 'ArrowRight':
      case 'ArrowUp':
      case 'ArrowDown': go(e.key); break;
      case 'Tab': {
        var focusable = [closeBtn, prevBtn, nextBtn].filter(function (b) { return !b.disabled; });
        var pos = focusable.indexOf(document.activeElement);
        var next = e.shiftKey ? pos - 1 : pos + 1;
        focusable[(next + focusable.length) % focusable.length].focus();
        break;
      }
      default: return;
    }
    e.preventDefault();
  });
})();
</script>'''


def navigation_targets(row_lengths: list[int]) -> list[dict[str, int | None]]:
    """Lightbox move targets for every trigger, in document order.

    Rows are diff groups and columns are image roles. Left/Right stay in
    the row; Up/Down keep the column, clamped to the target row's last
    image; prev/next walk all images in order. A target is the document
    index of the image to show, or None at an edge. Nothing wraps.
    """
    offsets = []
    total = 0
    for length in row_lengths:
        offsets.append(total)
        total += length

    def at(row: int, col: int) -> int:
        return offsets[row] + min(col, row_lengths[row] - 1)

    targets = []
    for row, length in enumerate(row_lengths):
        for col in range(length):
            index = offsets[row] + col
            targets.append({
                "ArrowLeft": index - 1 if col > 0 else None,
                "ArrowRight": index + 1 if col < length - 1 else None,
                "ArrowUp": at(row - 1, col) if row > 0 else None,
                "ArrowDown": at(row + 1, col) if row < len(row_lengths) - 1 else None,
                "prev": index - 1 if index > 0 else None,
                "next": index + 1 if index < total - 1 else None,
            })
    return targets


def _lightbox(row_lengths: list[int]) -> str:
    nav = json.dumps(navigation_targets(row_lengths), separators=(",", ":"))
    return (f'{LIGHTBOX_HTML}\n<script type="application/json" id="lightbox-nav">{nav}</script>'
            f'{LIGHTBOX_SCRIPT}')


def build_html(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
) -> str:
    """Build the complete report document."""
    summary = summarize(results, baseline_only, candidate_only)

    differences = [r for r in results if r.has_difference]
    diff_groups = [_build_diff_group(row, r) for row, r in enumerate(differences)]

    diff_section = ""
    if diff_groups:
        diff_section = f'<h2 class="section-title">Differences ({len(diff_groups)})</h2>{"".join(diff_groups)}'

    identical_section = ""
    identical = [r.pair.name for r in results if not r.has_difference]
    if identical:
        items = "".join(f"<li><code>{html.escape(n)}</code></li>" for n in identical)
        identical_section = (f'<details class="file-list identical"><summary>Identical Files '
                             f'({len(identical)})</summary><ul>{items}</ul></details>')

    lightbox = _lightbox([len(_group_images(r)) for r in differences]) if diff_groups else ""

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Visual Diff Report &mdash; {summary.status_text}</title>
<style>
  :root {{ --pass: #22c55e; --fail: #ef4444; --removed: #f97316; --added: #6366f1; --bg: #f8fafc; --card: white; --border: #e2e8f0; --text: #1e293b; --muted: #64748b; }}
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--text); line-height: 1.6; padding: 1.5rem; }}
  body.lightbox-open {{ overflow: hidden; }}
  .container {{ max-width: 1400px; margin: 0 auto; }}
  h1 {{ font-size: 1.8rem; margin-bottom: 0.6rem; }}
  /* Status banner */
  .status {{ display: inline-flex; align-items: center; gap: 0.5rem; font-weight: 700; padding: 0.5rem 1rem; border-radius: 8px; margin-bottom: 1.5rem; }}
  .status.pass {{ background: #dcfce7; color: #166534; }}
  .status.fail {{ background: #fecaca; color: #991b1b; }}
  .status-icon {{ font-size: 1.2rem; }}
  /* Summary cards */
  .summary {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(130px, 1fr)); gap: 0.8rem; margin-bottom: 1.5rem; }}
  .stat {{ background: var(--card); border-radius: 8px; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); text-align: center; }}
  .stat .value {{ font-size: 1.8rem; font-weight: 700; }}
  .stat .label {{ font-size: 0.8rem; color: var(--muted); }}
  .stat.different .value {{ color: var(--fail); }}
  .stat.removed .value {{ color: var(--removed); }}
  .stat.added .value {{ color: var(--added); }}
  .stat.identical .value {{ color: var(--pass); }}
  /* Badges */
  .badge {{ display: inline-block; padding: 0.15rem 0.55rem; border-radius: 9999px; font-size: 0.75rem; font-weight: 600; white-space: nowrap; }}
  .badge.fail {{ background: #fecaca; color: #991b1b; }}
  /* Diff groups */
  .section-title {{ font-size: 1.1rem; margin-bottom: 0.6rem; }}
  .diff-group {{ background: var(--card); border-radius: 8px; margin-bottom: 1rem; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); border-left: 4px solid var(--fail); }}
  .diff-header {{ display: flex; align-items: center; gap: 0.6rem; margin-bottom: 0.6rem; flex-wrap: wrap; }}
  .mismatch-note {{ background: #fefce8; border: 1px solid #fde68a; color: #92400e; border-radius: 6px; padding: 0.4rem 0.8rem; margin-bottom: 0.6rem; font-size: 0.88rem; }}
  .diff-images {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 0.8rem; }}
  .diff-figure {{ text-align: center; }}
  .diff-figure figcaption {{ font-size: 0.75rem; color: var(--muted); margin-top: 0.2rem; }}
  .lightbox-trigger {{ display: block; width: 100%; padding: 0; border: 1px solid var(--border); border-radius: 6px; background: repeating-conic-gradient(#f1f5f9 0% 25%, white 0% 50%) 50% / 16px 16px; cursor: zoom-in; overflow: hidden; }}
  .lightbox-trigger:focus-visible {{ outline: 3px solid var(--added); outline-offset: 2px; }}
  .lightbox-trigger img {{ display: block; width: 100%; height: auto; }}
  /* File lists */
  .file-list {{ background: var(--card); border-radius: 8px; padding: 1rem 1.2rem; margin-bottom: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); }}
  .file-list h2, .file-list summary {{ font-size: 1rem; margin-bottom: 0.4rem; }}
  .file-list summary {{ cursor: pointer; font-weight: 600; }}
  .file-list ul {{ margin-left: 1.2rem; font-size: 0.88rem; }}
  .file-list.removed {{ border-left: 4px solid var(--removed); }}
  .file-list.added {{ border-left: 4px solid var(--added); }}
  .file-list.identical {{ border-left: 4px solid var(--pass); }}
  /* Lightbox */
  .lightbox {{ position: fixed; inset: 0; z-index: 1000; background: rgba(15,23,42,0.92); display: flex; align-items: center; justify-content: center; gap: 1rem; padding: 2rem; }}
  .lightbox[hidden] {{ display: none; }}
  .lightbox-body {{ display: flex; flex-direction: column; align-items: center; max-width: 90vw; max-height: 90vh; }}
  .lightbox-body img {{ max-width: 100%; max-height: calc(90vh - 3rem); object-fit: contain; background: white; border-radius: 4px; }}
  .lightbox-body figcaption {{ color: #f1f5f9; font-size: 0.9rem; margin-top: 0.6rem; }}
  .lightbox-counter {{ color: #94a3b8; margin-left: 0.5rem; }}
  .lightbox button {{ background: rgba(255,255,255,0.12); color: white; border: none; border-radius: 9999px; cursor: pointer; font-size: 1.8rem; width: 3rem; height: 3rem; line-height: 1; }}
  .lightbox button:hover:not(:disabled) {{ background: rgba(255,255,255,0.25); }}
  .lightbox button:disabled {{ opacity: 0.3; cursor: default; }}
  .lightbox button:focus-visible {{ outline: 3px solid white; }}
  .lightbox-close {{ position: absolute; top: 1rem; right: 1rem; }}
</style>
</head>
<body>
<div class="container">
  <h1>Visual Diff Report</h1>
  {_status_banner(summary)}

  <div class="summary">
    {_stat(summary.total, "Total Images")}
    {_stat(summary.different, "Different", "different")}
    {_stat(summary.removed, "Removed", "removed")}
    {_stat(summary.added, "Added", "added")}
    {_stat(summary.identical, "Identical", "identical")}
  </div>

  {diff_section}
  {_build_file_list("Removed Files", [f.name for f in baseline_only], "removed")}
  {_build_file_list("Added Files", [f.name for f in candidate_only], "added")}
  {identical_section}
</div>
{lightbox}
</body>
</html>'''


def generate_html_report(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
    output_dir: Path,
) -> Path:
    """Write index.html into the output directory and return its path.

    Images are referenced relative to the report, under images/, where the
    comparer has already written them.
    """
    output_path = Path(output_dir) / HTML_REPORT_FILENAME
    report_html = build_html(results, baseline_only, candidate_only)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(report_html)
    logger.debug("Wrote HTML report with %d diff groups", sum(1 for r in results if r.has_difference))
    return output_path
