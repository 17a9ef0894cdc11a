# skillradar/core/export/template.py
"""HTML shell, CSS and inline script of the standalone export document.

Markers (each must appear exactly once in HTML_TEMPLATE):
    __TITLE__, __HEADING__  HTML-escaped document title
    __TOKEN__           snapshot token (alphabet [A-Za-z0-9_-])
    __GEOMETRY_JSON__   radar constants shared with radar_geometry
    __AUTO_PRINT__      "true" / "false"
    __AUTO_PRINT_DELAY__ milliseconds before window.print()
"""
from __future__ import annotations

HTML_SHELL = r"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>__TITLE__</title>
<style>
__CSS_BLOCK__
</style>
</head>
<body>
__BODY_MARKUP__
<script>
__JS_BLOCK__
</script>
</body>
</html>
"""

CSS_BLOCK = r"""
:root { color-scheme: dark; }
* { box-sizing: border-box; }
body { margin: 0; font: 14px system-ui, sans-serif; background: #1e1e2e; color: #cdd6f4; }
header { padding: 16px 24px 0; }
h1 { margin: 0; font-size: 20px; }
.subject { color: #a6adc8; margin-top: 4px; }
main { display: grid; grid-template-columns: minmax(0, 2fr) minmax(240px, 1fr); gap: 16px; padding: 16px 24px; }
.chart-wrap { position: relative; min-height: 420px; height: 60vh; }
#graph-canvas { width: 100%; height: 100%; display: block; cursor: pointer; }
#graph-legend { color: #a6adc8; font-size: 12px; margin-top: 8px; }
.detail { background: #313244; border-radius: 8px; padding: 12px 16px; }
.detail[hidden] { display: none; }
.detail h2 { margin: 0 0 4px; font-size: 16px; }
.detail ul, .tasks ul { padding-left: 18px; }
.task-score { color: #89b4fa; margin-left: 6px; }
.task-description { display: block; color: #a6adc8; font-size: 12px; }
.tasks { padding: 0 24px 24px; }
.error { padding: 24px; color: #f38ba8; }
@media print {
  body { background: #fff; color: #000; }
  main { grid-template-columns: 1fr; }
  .detail { background: none; border: 1px solid #999; }
  .subject, #graph-legend, .task-description { color: #333; }
}
"""

BODY_MARKUP = r"""
<header>
  <h1>__HEADING__</h1>
  <div class="subject" id="subject-name"></div>
</header>
<main>
  <section>
    <div class="chart-wrap"><canvas id="graph-canvas"></canvas></div>
    <div id="graph-legend"></div>
  </section>
  <aside class="detail" id="competency-detail" hidden>
    <h2 id="competency-detail-title"></h2>
    <div id="competency-detail-level"></div>
    <ul id="competency-detail-list"></ul>
    <button type="button" id="competency-detail-close">Close</button>
  </aside>
</main>
<section class="tasks">
  <h2>Scored tasks</h2>
  <ul id="task-list"></ul>
</section>
"""

JS_BLOCK = r"""
(function () {
  'use strict';
  const TOKEN = "__TOKEN__";
  const GEO = __GEOMETRY_JSON__;
  const AUTO_PRINT = __AUTO_PRINT__;
  const AUTO_PRINT_DELAY = __AUTO_PRINT_DELAY__;

  function bytesFromToken(token) {
    let s = token.replace(/-/g, '+').replace(/_/g, '/');
    while (s.length % 4) s += '=';
    const bin = atob(s);
    const out = new Uint8Array(bin.length);
    for (let i = 0; i < bin.length; i++) out[i] = bin.charCodeAt(i);
    return out;
  }

  async function decodeToken(token) {
    try {
      const stream = new Blob([bytesFromToken(token)]).stream()
        .pipeThrough(new DecompressionStream('gzip'));
      const doc = JSON.parse(await new Response(stream).text());
      if (!doc || doc.v !== 1 || (!doc.t && !doc.c)) return null;
      const scores = doc.s || {};
      return {
        tasks: (doc.t || []).map(function (r) { return { id: r[0], name: r[1], description: r[2] || '' }; }),
        competencies: (doc.c || []).map(function (r) { return { id: r[0], name: r[1] }; }),
        getScore: function (taskId, compId) {
          const row = scores[String(taskId)];
          return row && row[String(compId)] ? row[String(compId)] : 0;
        },
        subjectName: doc.n || ''
      };
    } catch (e) {
      return null;
    }
  }

  function levelsFor(data) {
    return data.competencies.map(function (c) {
      let sum = 0, count = 0;
      data.tasks.forEach(function (t) {
        const p = data.getScore(t.id, c.id);
        if (p > 0) { sum += p; count += 1; }
      });
      return { id: c.id, name: c.name, level: count > 0 ? Math.round(sum * 10 / count) / 10 : 0 };
    });
  }

  function angleFor(i, n) { return (2 * Math.PI * i) / n - Math.PI / 2; }

  function layoutFor(cw, ch, n) {
    const radius = Math.min(cw, ch) * GEO.radiusFraction;
    return { cx: cw / 2, cy: ch / 2, radius: radius, n: n };
  }

  function toXY(layout, r, i) {
    const a = angleFor(i, layout.n);
    return { x: layout.cx + r * Math.cos(a), y: layout.cy + r * Math.sin(a) };
  }

  function hitTest(layout, x, y) {
    if (layout.n === 0) return null;
    const dx = x - layout.cx, dy = y - layout.cy;
    const dist = Math.sqrt(dx * dx + dy * dy);
    if (dist < GEO.minHitDistance || dist > layout.radius + GEO.labelOffset + GEO.outerMargin) return null;
    const angle = (Math.atan2(dy, dx) + Math.PI / 2 + 2 * Math.PI) % (2 * Math.PI);
    return Math.floor(angle / (2 * Math.PI / layout.n)) % layout.n;
  }

  function formatLevel(v) { return Number.isInteger(v) ? String(v) : v.toFixed(1); }

  function draw(canvas, ctx, levels, legend) {
    const dpr = window.devicePixelRatio || 1;
    const cw = canvas.width / dpr, ch = canvas.height / dpr;
    if (!cw || !ch) return;
    ctx.save();
    ctx.setTransform(1, 0, 0, 1, 0, 0);
    ctx.clearRect(0, 0, canvas.width, canvas.height);
    ctx.restore();
    const n = levels.length;
    const layout = layoutFor(cw, ch, n);
    if (n === 0) {
      ctx.fillStyle = GEO.colors.placeholder;
      ctx.font = '14px system-ui, sans-serif';
      ctx.textAlign = 'center';
      ctx.fillText(GEO.placeholder, layout.cx, layout.cy);
      legend.textContent = '';
      return;
    }
    ctx.strokeStyle = GEO.colors.grid;
    ctx.lineWidth = 1;
    GEO.gridLevels.forEach(function (ring) {
      const r = (ring / GEO.scaleMax) * layout.radius;
      ctx.beginPath();
      for (let i = 0; i <= n; i++) {
        const p = toXY(layout, r, i % n);
        if (i === 0) ctx.moveTo(p.x, p.y); else ctx.lineTo(p.x, p.y);
      }
      ctx.closePath();
      ctx.stroke();
    });
    ctx.strokeStyle = GEO.colors.axis;
    for (let i = 0; i < n; i++) {
      const end = toXY(layout, layout.radius, i);
      ctx.beginPath();
      ctx.moveTo(layout.cx, layout.cy);
      ctx.lineTo(end.x, end.y);
      ctx.stroke();
    }
    const points = levels.map(function (v, i) {
      return toXY(layout, (Math.max(0, Math.min(GEO.scaleMax, v.level)) / GEO.scaleMax) * layout.radius, i);
    });
    ctx.fillStyle = GEO.colors.fill;
    ctx.strokeStyle = GEO.colors.outline;
    ctx.lineWidth = 2;
    ctx.lineJoin = 'round';
    ctx.beginPath();
    points.forEach(function (p, i) { if (i === 0) ctx.moveTo(p.x, p.y); else ctx.lineTo(p.x, p.y); });
    ctx.closePath();
    ctx.fill();
    ctx.stroke();
    points.forEach(function (p) {
      ctx.beginPath();
      ctx.arc(p.x, p.y, GEO.dotRadius, 0, 2 * Math.PI);
      ctx.fillStyle = GEO.colors.dot;
      ctx.fill();
      ctx.strokeStyle = GEO.colors.dotOutline;
      ctx.lineWidth = 1;
      ctx.stroke();
    });
    ctx.font = '12px system-ui, sans-serif';
    ctx.fillStyle = GEO.colors.label;
    ctx.textAlign = 'center';
    ctx.textBaseline = 'middle';
    levels.forEach(function (v, i) {
      const p = toXY(layout, layout.radius + GEO.labelOffset, i);
      ctx.fillText(v.name + ' — ' + formatLevel(v.level), p.x, p.y);
    });
    legend.textContent = GEO.legend;
  }

  function li(text, score, description) {
    const item = document.createElement('li');
    item.appendChild(document.createTextNode(text));
    if (score) {
      const s = document.createElement('span');
      s.className = 'task-score';
      s.textContent = score + ' pt';
      item.appendChild(s);
    }
    if (description) {
      const d = document.createElement('span');
      d.className = 'task-description';
      d.textContent = description;
      item.appendChild(d);
    }
    return item;
  }

  function showDetail(data, levels, compId) {
    const comp = data.competencies.find(function (c) { return c.id === compId; });
    if (!comp) return;
    const lvl = levels.find(function (l) { return l.id === compId; });
    const rows = data.tasks
      .filter(function (t) { return data.getScore(t.id, compId) > 0; })
      .map(function (t) { return { name: t.name, description: t.description, score: data.getScore(t.id, compId) }; })
      .sort(function (a, b) { return b.score - a.score; });
    document.getElementById('competency-detail-title').textContent = comp.name;
    document.getElementById('competency-detail-level').textContent =
      'Level: ' + (lvl ? formatLevel(lvl.level) : '0') + ' (average of task scores)';
    const list = document.getElementById('competency-detail-list');
    list.innerHTML = '';
    if (rows.length === 0) list.appendChild(li('No task has scored this competency yet.'));
    rows.forEach(function (r) { list.appendChild(li(r.name, r.score, r.description)); });
    document.getElementById('competency-detail').hidden = false;
  }

  function renderTaskList(data) {
    const list = document.getElementById('task-list');
    list.innerHTML = '';
    data.tasks.forEach(function (t) {
      const parts = data.competencies
        .filter(function (c) { return data.getScore(t.id, c.id) > 0; })
        .map(function (c) { return c.name + ' ' + data.getScore(t.id, c.id); });
      if (parts.length === 0) return;
      list.appendChild(li(t.name + ': ' + parts.join(', '), 0, t.description));
    });
  }

  async function init() {
    const data = await decodeToken(TOKEN);
    if (!data) {
      document.body.innerHTML = '<p class="error">This export could not be read.</p>';
      return;
    }
    document.getElementById('subject-name').textContent = data.subjectName;
    const canvas = document.getElementById('graph-canvas');
    const ctx = canvas.getContext('2d');
    const legend = document.getElementById('graph-legend');
    const levels = levelsFor(data);

    function resize() {
      const wrap = canvas.parentElement;
      const dpr = window.devicePixelRatio || 1;
      canvas.width = wrap.clientWidth * dpr;
      canvas.height = wrap.clientHeight * dpr;
      ctx.setTransform(dpr, 0, 0, dpr, 0, 0);
      draw(canvas, ctx, levels, legend);
    }

    canvas.addEventListener('click', function (e) {
      const rect = canvas.getBoundingClientRect();
      const dpr = window.devicePixelRatio || 1;
      const x = ((e.clientX - rect.left) / rect.width) * (canvas.width / dpr);
      const y = ((e.clientY - rect.top) / rect.height) * (canvas.height / dpr);
      const index = hitTest(layoutFor(canvas.width / dpr, canvas.height / dpr, levels.length), x, y);
      if (index === null) return;
      showDetail(data, levels, levels[index].id);
    });
    document.getElementById('competency-detail-close').addEventListener('click', function () {
      document.getElementById('competency-detail').hidden = true;
    });
    window.addEventListener('resize', resize);
    resize();
    renderTaskList(data);
    if (AUTO_PRINT) setTimeout(function () { window.print(); }, AUTO_PRINT_DELAY);
  }

  init();
})();
"""

# Assemble the template (data is injected later by build_standalone_html)
HTML_TEMPLATE = (
    HTML_SHELL
    .replace("__CSS_BLOCK__", CSS_BLOCK)
    .replace("__JS_BLOCK__", JS_BLOCK)
    .replace("__BODY_MARKUP__", BODY_MARKUP)
)
