"""Inline HTML/JS pages served by the web app.

Pages are static; all data comes from the JSON API. Dashboards live in the
browser's ``localStorage`` under ``dashboard:{id}``.
"""

from __future__ import annotations

STORAGE_PREFIX = "dashboard:"

_STYLE = r"""
<style>
  :root {
    --bg: #0a0e17;
    --surface: #111827;
    --surface2: #1a2332;
    --border: #1e2d3d;
    --text: #e2e8f0;
    --dim: #64748b;
    --cyan: #22d3ee;
    --green: #34d399;
    --red: #f87171;
    --yellow: #fbbf24;
    --blue: #60a5fa;
    --purple: #a78bfa;
  }
  * { margin:0; padding:0; box-sizing:border-box; }
  body {
    font-family: 'SF Mono', 'Cascadia Code', 'JetBrains Mono', 'Fira Code', monospace;
    background: var(--bg);
    color: var(--text);
    min-height: 100vh;
    padding: 20px;
  }
  a { color: var(--cyan); }
  nav {
    display: flex;
    gap: 20px;
    max-width: 1200px;
    margin: 0 auto 16px;
    font-size: 0.75rem;
    letter-spacing: 1px;
    text-transform: uppercase;
  }
  nav a { color: var(--dim); text-decoration: none; }
  nav a:hover { color: var(--cyan); }
  .header {
    max-width: 1200px;
    margin: 0 auto 24px;
    padding: 16px 0;
    border-bottom: 1px solid var(--border);
  }
  .header h1 { font-size: 1.3rem; color: var(--cyan); letter-spacing: 1px; }
  .header .subtitle { color: var(--dim); font-size: 0.75rem; margin-top: 6px; }
  .container { max-width: 1200px; margin: 0 auto; }
  .card {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 8px;
    padding: 16px 20px;
    overflow: hidden;
    margin-bottom: 16px;
  }
  .card-title {
    font-size: 0.65rem;
    font-weight: 700;
    color: var(--dim);
    letter-spacing: 2px;
    text-transform: uppercase;
    margin-bottom: 12px;
  }
  input, textarea {
    background: var(--surface2);
    border: 1px solid var(--border);
    color: var(--text);
    font-family: inherit;
    padding: 8px 10px;
    border-radius: 4px;
  }
  textarea { width: 100%; min-height: 90px; }
  button {
    background: rgba(34,211,238,0.15);
    border: 1px solid rgba(34,211,238,0.4);
    color: var(--cyan);
    font-family: inherit;
    padding: 8px 16px;
    border-radius: 4px;
    cursor: pointer;
  }
  button:disabled { opacity: 0.5; cursor: wait; }
  pre {
    background: var(--surface2);
    padding: 12px;
    border-radius: 4px;
    overflow: auto;
    font-size: 0.75rem;
    white-space: pre-wrap;
  }
  .error { color: var(--red); font-size: 0.8rem; margin-top: 8px; }
  .dim { color: var(--dim); font-size: 0.75rem; }
  .empty-state { color: var(--dim); font-size: 0.8rem; font-style: italic; padding: 12px 0; }
  .positive { color: var(--green); }
  .negative { color: var(--red); }
  .warn { color: var(--yellow); }

  /* Dashboard grid */
  .grid {
    display: grid;
    grid-template-columns: repeat(12, 1fr);
    grid-auto-rows: 90px;
    gap: 12px;
  }
  .widget {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 8px;
    padding: 12px 14px;
    overflow: auto;
    display: flex;
    flex-direction: column;
  }
  .widget .card-title { margin-bottom: 8px; }
  .widget-body { flex: 1; position: relative; min-height: 0; }
  .widget-body canvas { width: 100%; height: 100%; }
  .widget-error { color: var(--yellow); font-size: 0.65rem; margin-top: 4px; }
  .big-number { font-size: 2rem; font-weight: 700; line-height: 1; }
  .status-ok { color: var(--green); }
  .status-warning, .status-warn { color: var(--yellow); }
  .status-critical, .status-alert { color: var(--red); }
  .status-no_data { color: var(--dim); }
  .legend { display: flex; gap: 12px; font-size: 0.65rem; color: var(--dim); margin-top: 4px; }
  .legend span::before { content: '\25A0 '; color: var(--swatch); }
  table { width: 100%; border-collapse: collapse; font-size: 0.72rem; }
  td { padding: 4px 6px; border-bottom: 1px solid rgba(30,45,61,0.5); vertical-align: top; }
  .lvl-error { color: var(--red); }
  .lvl-warn { color: var(--yellow); }
  .lvl-info { color: var(--blue); }
  .lvl-debug { color: var(--dim); }
  .markdown h1 { font-size: 1.1rem; color: var(--cyan); margin: 6px 0; }
  .markdown h2 { font-size: 0.95rem; color: var(--cyan); margin: 10px 0 4px; }
  .markdown h3 { font-size: 0.85rem; color: var(--purple); margin: 8px 0 4px; }
  .markdown p, .markdown li { font-size: 0.78rem; line-height: 1.5; }
  .markdown ul { padding-left: 18px; }
  .markdown code { background: var(--surface2); padding: 1px 4px; border-radius: 3px; }
  .toolbar { display: flex; gap: 12px; align-items: center; margin-bottom: 16px; }
</style>
"""

_NAV = r"""
<nav>
  <a href="/">Investigate</a>
  <a href="/chat">Chat</a>
  <a href="/datadog">Monitor Lookup</a>
</nav>
"""

# Shared helpers: HTML escaping and the dashboard storage key
_COMMON_JS = r"""
const $ = id => document.getElementById(id);
const STORAGE_PREFIX = 'dashboard:';

function esc(v) {
  return String(v == null ? '' : v)
    .replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;')
    .replace(/"/g, '&quot;').replace(/'/g, '&#39;');
}

async function postJSON(url, body) {
  const resp = await fetch(url, {
    method: 'POST',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify(body || {}),
  });
  let data = {};
  try { data = await resp.json(); } catch (e) { data = {}; }
  if (!resp.ok) throw new Error(data.error || ('HTTP ' + resp.status));
  return data;
}
"""


def _page(title: str, body: str, script: str) -> str:
    return (
        '<!DOCTYPE html>\n<html lang="en">\n<head>\n'
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{title}</title>\n"
        f"{_STYLE}</head>\n<body>\n{_NAV}{body}\n"
        f"<script>{_COMMON_JS}{script}</script>\n</body>\n</html>"
    )


# ── Home: investigate + saved dashboards ────────────────────────

_INDEX_BODY = r"""
<div class="header">
  <h1>AI Monitor Investigator</h1>
  <div class="subtitle">Enter a Datadog monitor id to generate an investigation dashboard.</div>
</div>
<div class="container">
  <div class="card">
    <div class="card-title">Investigate Monitor</div>
    <form id="investigate-form">
      <input id="monitor-id" placeholder="Monitor ID" inputmode="numeric" required>
      <button id="investigate-btn" type="submit">Investigate</button>
    </form>
    <div id="investigate-error" class="error"></div>
    <div id="investigation" class="dim" style="margin-top:8px"></div>
  </div>
  <div class="card">
    <div class="card-title">Saved Dashboards</div>
    <div id="saved"><div class="empty-state">No dashboards yet</div></div>
  </div>
</div>
"""

_INDEX_JS = r"""
function savedDashboards() {
  const out = [];
  for (let i = 0; i < localStorage.length; i++) {
    const key = localStorage.key(i);
    if (!key || !key.startsWith(STORAGE_PREFIX)) continue;
    try {
      out.push(JSON.parse(localStorage.getItem(key)));
    } catch (e) { /* skip corrupt entries */ }
  }
  return out.sort((a, b) => String(b.created_at).localeCompare(String(a.created_at)));
}

function renderSaved() {
  const items = savedDashboards();
  if (!items.length) return;
  $('saved').innerHTML = '<table>' + items.map(d =>
    `<tr><td><a href="/dashboard/${encodeURIComponent(d.id)}">${esc(d.title)}</a></td>` +
    `<td class="dim">${esc(new Date(d.created_at).toLocaleString())}</td></tr>`
  ).join('') + '</table>';
}

$('investigate-form').addEventListener('submit', async (ev) => {
  ev.preventDefault();
  const id = $('monitor-id').value.trim();
  $('investigate-error').textContent = '';
  if (!/^\d+$/.test(id)) {
    $('investigate-error').textContent = 'Monitor ID must be a number';
    return;
  }
  $('investigate-btn').disabled = true;
  $('investigation').textContent = 'Designing dashboard...';
  try {
    const result = await postJSON('/api/investigate/monitor/' + id);
    const dashboard = result.dashboard;
    localStorage.setItem(STORAGE_PREFIX + dashboard.id, JSON.stringify(dashboard));
    window.location.href = '/dashboard/' + encodeURIComponent(dashboard.id);
  } catch (e) {
    $('investigate-error').textContent = e.message;
    $('investigation').textContent = '';
  } finally {
    $('investigate-btn').disabled = false;
  }
});

renderSaved();
"""

INDEX_HTML = _page("AI Monitor Investigator", _INDEX_BODY, _INDEX_JS)


# ── Dashboard viewer ────────────────────────────────────────────

_DASHBOARD_BODY = r"""
<div class="header">
  <h1 id="title">Loading...</h1>
  <div class="subtitle" id="description"></div>
</div>
<div class="container">
  <div class="toolbar">
    <button id="refresh-btn">Refresh</button>
    <span class="dim" id="time-range"></span>
    <span class="dim" id="last-update"></span>
  </div>
  <div id="grid" class="grid"></div>
  <div id="missing" class="card" style="display:none">
    <div class="empty-state">Dashboard not found in this browser. <a href="/">Investigate a monitor</a>.</div>
  </div>
</div>
"""

_DASHBOARD_JS = r"""
const COLORS = ['#22d3ee', '#a78bfa', '#34d399', '#fbbf24', '#60a5fa', '#f87171'];

function loadDashboard(id) {
  const raw = localStorage.getItem(STORAGE_PREFIX + id);
  if (!raw) return null;
  const d = JSON.parse(raw);
  // ISO strings back into Date values
  d.created_at = new Date(d.created_at);
  d.time_range.from = new Date(d.time_range.from);
  d.time_range.to = new Date(d.time_range.to);
  return d;
}

// ── Renderers: one per widget type ──

function renderMarkdown(body, data) {
  // escape first, then apply the limited formatting below
  const lines = esc(data.content).split('\n');
  let html = '', inList = false;
  const inline = s => s
    .replace(/`([^`]+)`/g, '<code>$1</code>')
    .replace(/\*\*([^*]+)\*\*/g, '<strong>$1</strong>')
    .replace(/\[([^\]]+)\]\((https?:\/\/[^\s)]+)\)/g, '<a href="$2" target="_blank" rel="noopener">$1</a>');
  for (const line of lines) {
    const item = line.match(/^\s*- (\[ \] )?(.*)$/);
    if (item) {
      if (!inList) { html += '<ul>'; inList = true; }
      html += '<li>' + (item[1] ? '&#9744; ' : '') + inline(item[2]) + '</li>';
      continue;
    }
    if (inList) { html += '</ul>'; inList = false; }
    const h = line.match(/^(#{1,3}) (.*)$/);
    if (h) html += `<h${h[1].length}>${inline(h[2])}</h${h[1].length}>`;
    else if (line.trim()) html += '<p>' + inline(line) + '</p>';
  }
  if (inList) html += '</ul>';
  body.innerHTML = '<div class="markdown">' + html + '</div>';
}

function renderTimeseries(body, data, config) {
  const series = (data.series || []).filter(s => s.data && s.data.length);
  if (!series.length) { body.innerHTML = '<div class="empty-state">No data</div>'; return; }
  body.innerHTML = '<canvas></canvas>';
  const canvas = body.querySelector('canvas');
  const ctx = canvas.getContext('2d');
  const dpr = window.devicePixelRatio || 1;
  const rect = body.getBoundingClientRect();
  canvas.width = rect.width * dpr;
  canvas.height = rect.height * dpr;
  ctx.scale(dpr, dpr);
  const W = rect.width, H = rect.height, pad = 4;

  const all = series.flatMap(s => s.data);
  const tLo = Math.min(...all.map(p => p.timestamp)), tHi = Math.max(...all.map(p => p.timestamp));
  const lo = Math.min(...all.map(p => p.value), 0), hi = Math.max(...all.map(p => p.value), 1);
  const xOf = t => ((t - tLo) / ((tHi - tLo) || 1)) * W;
  const yOf = v => pad + (H - 2*pad) * (1 - (v - lo) / ((hi - lo) || 1));

  ctx.strokeStyle = '#1e2d3d';
  ctx.lineWidth = 0.5;
  for (let i = 0; i <= 4; i++) {
    const y = pad + (H - 2*pad) * (1 - i/4);
    ctx.beginPath(); ctx.moveTo(0, y); ctx.lineTo(W, y); ctx.stroke();
  }

  series.forEach((s, idx) => {
    const color = s.color || COLORS[idx % COLORS.length];
    if (config.line_type === 'bar') {
      const bw = Math.max(1, W / s.data.length / series.length - 1);
      ctx.fillStyle = color;
      s.data.forEach(p => ctx.fillRect(xOf(p.timestamp) + idx * bw - bw / 2, yOf(p.value), bw, H - yOf(p.value)));
      return;
    }
    ctx.beginPath();
    s.data.forEach((p, i) => i === 0 ? ctx.moveTo(xOf(p.timestamp), yOf(p.value)) : ctx.lineTo(xOf(p.timestamp), yOf(p.value)));
    ctx.strokeStyle = color;
    ctx.lineWidth = 2;
    ctx.stroke();
    if (config.line_type === 'area') {
      ctx.lineTo(xOf(s.data[s.data.length - 1].timestamp), H);
      ctx.lineTo(xOf(s.data[0].timestamp), H);
      ctx.closePath();
      ctx.globalAlpha = 0.2;
      ctx.fillStyle = color;
      ctx.fill();
      ctx.globalAlpha = 1;
    }
  });

  if (config.show_legend !== false) {
    const legend = document.createElement('div');
    legend.className = 'legend';
    legend.innerHTML = series.map((s, i) =>
      `<span style="--swatch:${s.color || COLORS[i % COLORS.length]}">${esc(s.name)}</span>`).join('');
    body.parentElement.appendChild(legend);
  }
}

function renderMetric(body, data) {
  const arrow = {up: '&#9650;', down: '&#9660;', stable: '&#9644;'}[data.trend] || '';
  const change = Number(data.change_percent || 0);
  body.innerHTML =
    `<div class="big-number status-${esc(data.status)}">${Number(data.value).toFixed(2)}${esc(data.unit || '')}</div>` +
    `<div class="dim">${arrow} ${change >= 0 ? '+' : ''}${change.toFixed(1)}%</div>`;
}

function renderLogs(body, data, config) {
  const entries = data.entries || [];
  if (!entries.length) { body.innerHTML = '<div class="empty-state">No logs</div>'; return; }
  body.innerHTML = '<table>' + entries.map(e =>
    '<tr>' +
    (config.show_timestamp !== false ? `<td class="dim">${esc(new Date(e.timestamp).toLocaleTimeString())}</td>` : '') +
    `<td class="lvl-${esc(e.level)}">${esc(String(e.level).toUpperCase())}</td>` +
    (config.show_service !== false ? `<td class="dim">${esc(e.service || '')}</td>` : '') +
    `<td>${esc(e.message)}</td></tr>`
  ).join('') + '</table>' +
  (data.total_count != null ? `<div class="dim">${entries.length} of ${esc(data.total_count)}</div>` : '');
}

function renderAlertStatus(body, data) {
  const label = {ok: 'OK', alert: 'ALERT', warn: 'WARN', no_data: 'NO DATA'}[data.status] || 'NO DATA';
  body.innerHTML =
    `<div class="big-number status-${esc(data.status)}">${label}</div>` +
    `<div class="dim">${esc(data.monitor_name)}</div>` +
    (data.last_triggered ? `<div class="dim">Triggered ${esc(new Date(data.last_triggered).toLocaleString())}</div>` : '');
}

const RENDERERS = {
  timeseries: renderTimeseries,
  metric: renderMetric,
  logs: renderLogs,
  alert_status: renderAlertStatus,
  markdown: renderMarkdown,
};

// alert_status reports its error without substituting data
const SAMPLE_BACKED = new Set(['timeseries', 'metric', 'logs']);

function renderWidget(widget, data) {
  const body = $('body-' + widget.id);
  const render = RENDERERS[widget.type];
  if (!render) throw new Error('Unsupported widget type ' + widget.type);
  body.parentElement.querySelectorAll('.legend, .widget-error').forEach(el => el.remove());
  render(body, data, widget.config);
  if (data.error) {
    const err = document.createElement('div');
    err.className = 'widget-error';
    err.textContent = SAMPLE_BACKED.has(widget.type) ? data.error + ' (showing sample data)' : data.error;
    body.parentElement.appendChild(err);
  }
}

function layoutGrid(dashboard) {
  $('grid').innerHTML = dashboard.widgets.map(w => {
    const l = w.layout;
    return `<div class="widget" style="grid-column:${l.x + 1} / span ${l.width};grid-row:${l.y + 1} / span ${l.height}">` +
      `<div class="card-title" title="${esc(w.description || '')}">${esc(w.title)}</div>` +
      `<div class="widget-body" id="body-${esc(w.id)}"><div class="empty-state">Loading...</div></div></div>`;
  }).join('');
}

async function loadWidget(widget, timeRange) {
  if (widget.type === 'markdown') {
    renderWidget(widget, {type: 'markdown', content: widget.config.content});
    return;
  }
  try {
    const result = await postJSON('/api/dashboard/data', {
      widget_config: widget.config,
      time_range: {from: timeRange.from.toISOString(), to: timeRange.to.toISOString(), display: timeRange.display},
    });
    renderWidget(widget, result.data);
  } catch (e) {
    $('body-' + widget.id).innerHTML = `<div class="error">${esc(e.message)}</div>`;
  }
}

async function refresh(dashboard) {
  $('refresh-btn').disabled = true;
  // each widget loads independently; one failure leaves the others alone
  await Promise.allSettled(dashboard.widgets.map(w => loadWidget(w, dashboard.time_range)));
  $('refresh-btn').disabled = false;
  $('last-update').textContent = 'Updated ' + new Date().toLocaleTimeString();
}

const dashboardId = decodeURIComponent(window.location.pathname.split('/').pop());
const dashboard = loadDashboard(dashboardId);
if (!dashboard) {
  $('title').textContent = 'Dashboard not found';
  $('missing').style.display = 'block';
  $('refresh-btn').style.display = 'none';
} else {
  document.title = dashboard.title;
  $('title').textContent = dashboard.title;
  $('description').textContent = dashboard.description || '';
  $('time-range').textContent = dashboard.time_range.display;
  layoutGrid(dashboard);
  refresh(dashboard);
  $('refresh-btn').addEventListener('click', () => refresh(dashboard));
}
"""

DASHBOARD_HTML = _page("Investigation Dashboard", _DASHBOARD_BODY, _DASHBOARD_JS)


# ── Chat ────────────────────────────────────────────────────────

_CHAT_BODY = r"""
<div class="header">
  <h1>Llama Chat</h1>
  <div class="subtitle">Ask a question, optionally with a screenshot.</div>
</div>
<div class="container">
  <div class="card">
    <form id="chat-form">
      <textarea id="message" placeholder="Message"></textarea>
      <div class="toolbar" style="margin-top:8px">
        <input type="file" id="image" accept="image/*">
        <button id="send-btn" type="submit">Send</button>
      </div>
    </form>
    <div id="chat-error" class="error"></div>
  </div>
  <div class="card">
    <div class="card-title">Response</div>
    <pre id="response">-</pre>
    <div id="metrics" class="dim" style="margin-top:8px"></div>
  </div>
</div>
"""

_CHAT_JS = r"""
function readImage(file) {
  return new Promise((resolve, reject) => {
    const reader = new FileReader();
    reader.onload = () => resolve(String(reader.result).split(',', 2)[1] || '');
    reader.onerror = () => reject(reader.error);
    reader.readAsDataURL(file);
  });
}

$('chat-form').addEventListener('submit', async (ev) => {
  ev.preventDefault();
  $('chat-error').textContent = '';
  const message = $('message').value.trim();
  const file = $('image').files[0];
  if (!message && !file) {
    $('chat-error').textContent = 'Message or image is required';
    return;
  }
  $('send-btn').disabled = true;
  try {
    const body = {message: message || null};
    if (file) body.image = await readImage(file);
    const result = await postJSON('/api/chat', body);
    $('response').textContent = result.response;
    $('metrics').textContent = (result.metrics || []).map(m => `${m.metric}: ${m.value}${m.unit ? ' ' + m.unit : ''}`).join(' | ');
  } catch (e) {
    $('chat-error').textContent = e.message;
  } finally {
    $('send-btn').disabled = false;
  }
});
"""

CHAT_HTML = _page("Llama Chat", _CHAT_BODY, _CHAT_JS)


# ── Monitor lookup ──────────────────────────────────────────────

_DATADOG_BODY = r"""
<div class="header">
  <h1>Monitor Lookup</h1>
  <div class="subtitle">Fetch a monitor's raw definition from Datadog.</div>
</div>
<div class="container">
  <div class="card">
    <form id="lookup-form">
      <input id="monitor-id" placeholder="Monitor ID" required>
      <button id="lookup-btn" type="submit">Fetch</button>
    </form>
    <div id="lookup-error" class="error"></div>
  </div>
  <div class="card">
    <div class="card-title">Monitor</div>
    <pre id="monitor">-</pre>
  </div>
  <div class="card">
    <div class="card-title">State History (last 24 hours)</div>
    <div id="history"><div class="empty-state">Fetch a monitor to see its transitions.</div></div>
  </div>
  <div class="card">
    <div class="card-title">Search Monitors</div>
    <form id="search-form">
      <input id="search-query" placeholder="service:api status:alert" required>
      <button id="search-btn" type="submit">Search</button>
    </form>
    <div id="search-error" class="error"></div>
    <div id="search-results"></div>
  </div>
</div>
"""

_DATADOG_JS = r"""
async function getJSON(url) {
  const resp = await fetch(url);
  const data = await resp.json();
  if (!resp.ok) throw new Error(data.error || ('HTTP ' + resp.status));
  return data;
}

function renderHistory(rows) {
  if (!rows.length) {
    $('history').innerHTML = '<div class="empty-state">No transitions in this window.</div>';
    return;
  }
  $('history').innerHTML = '<table>' + rows.map(r => {
    const status = String(r.status || r.state || 'unknown');
    const when = r.from_ts ? new Date(r.from_ts * 1000).toLocaleString() : '';
    return `<tr><td class="status-${esc(status.toLowerCase())}">${esc(status)}</td><td class="dim">${esc(when)}</td></tr>`;
  }).join('') + '</table>';
}

async function lookup(id) {
  $('lookup-error').textContent = '';
  $('lookup-btn').disabled = true;
  try {
    const data = await getJSON('/api/datadog/monitor/' + encodeURIComponent(id));
    $('monitor').textContent = JSON.stringify(data, null, 2);
    try {
      const hist = await getJSON('/api/datadog/monitor/' + encodeURIComponent(id) + '/history');
      renderHistory(Array.isArray(hist.history) ? hist.history : []);
    } catch (e) {
      $('history').innerHTML = `<div class="error">${esc(e.message)}</div>`;
    }
  } catch (e) {
    $('lookup-error').textContent = e.message;
    $('monitor').textContent = '-';
  } finally {
    $('lookup-btn').disabled = false;
  }
}

$('lookup-form').addEventListener('submit', (ev) => {
  ev.preventDefault();
  lookup($('monitor-id').value.trim());
});

$('search-form').addEventListener('submit', async (ev) => {
  ev.preventDefault();
  $('search-error').textContent = '';
  $('search-btn').disabled = true;
  try {
    const data = await getJSON('/api/datadog/monitors?query=' + encodeURIComponent($('search-query').value.trim()));
    const monitors = Array.isArray(data.monitors) ? data.monitors : [];
    $('search-results').innerHTML = monitors.length
      ? '<table>' + monitors.map(m =>
          `<tr><td><a href="#" data-id="${esc(m.id)}">${esc(m.id)}</a></td><td>${esc(m.name || '')}</td>` +
          `<td class="dim">${esc(m.status || m.overall_state || '')}</td></tr>`).join('') + '</table>'
      : '<div class="empty-state">No monitors matched.</div>';
  } catch (e) {
    $('search-error').textContent = e.message;
  } finally {
    $('search-btn').disabled = false;
  }
});

$('search-results').addEventListener('click', (ev) => {
  const link = ev.target.closest('a[data-id]');
  if (!link) return;
  ev.preventDefault();
  $('monitor-id').value = link.dataset.id;
  lookup(link.dataset.id);
});
"""

DATADOG_HTML = _page("Monitor Lookup", _DATADOG_BODY, _DATADOG_JS)
