"""Single-page UI for the meme flow."""

UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Catemoji</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      .row { margin-bottom: 1rem; }
      .hidden { display: none; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      img { max-width: 320px; margin-right: 1rem; border-radius: 8px; }
      #caption { font-size: 1.5rem; font-weight: 800; }
      #notice { color: #b00020; }
    </style>
  </head>
  <body>
    <h1>Catemoji</h1>
    <p>Your face + cat memes.</p>
    <p id="notice"></p>
    <div id="upload" class="row">
      <input id="file" type="file" accept="image/*" />
      <button onclick="post('/session/camera/start')">Use Camera</button>
    </div>
    <div id="camera" class="row hidden">
      <button onclick="post('/session/camera/capture')">Capture</button>
      <button onclick="post('/session/camera/stop')">Cancel</button>
    </div>
    <div id="working" class="row hidden">
      <h2 id="working-text"></h2>
      <button onclick="post('/session/restart')">Start Over</button>
    </div>
    <div id="complete" class="row hidden">
      <div class="row">
        <img id="source" alt="Your face" />
        <img id="background" alt="Your cat twin" />
      </div>
      <p><strong id="label"></strong></p>
      <p id="caption"></p>
      <a href="/session/download"><button>Download Meme</button></a>
      <button onclick="post('/session/restart')">Make Another</button>
    </div>
    <script>
      const show = (id, visible) =>
        document.getElementById(id).classList.toggle('hidden', !visible);

      function render(state) {
        document.getElementById('notice').textContent = state.notice || '';
        show('upload', state.phase === 'upload' && !state.camera_streaming);
        show('camera', state.phase === 'upload' && state.camera_streaming);
        show('working', state.phase === 'detecting' || state.phase === 'generating');
        show('complete', state.phase === 'complete');
        document.getElementById('working-text').textContent =
          state.phase === 'detecting' ? 'Reading your vibes...' : 'Generating meme magic...';
        if (state.phase === 'complete') {
          document.getElementById('source').src = state.source_image;
          document.getElementById('background').src = state.background_image;
          document.getElementById('label').textContent = state.label.toUpperCase();
          document.getElementById('caption').textContent = state.caption;
        }
      }

      async function refresh() {
        const res = await fetch('/session');
        render(await res.json());
      }

      async function post(path, body) {
        const res = await fetch(path, { method: 'POST', body: body });
        if (!res.ok) {
          const error = await res.json();
          document.getElementById('notice').textContent = error.detail;
          return;
        }
        render(await res.json());
      }

      document.getElementById('file').addEventListener('change', (event) => {
        const file = event.target.files[0];
        if (file) {
          post('/session/upload', file);
          event.target.value = '';
        }
      });

      refresh();
      setInterval(refresh, 500);
    </script>
  </body>
</html>
"""
