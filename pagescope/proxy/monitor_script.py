"""Monitoring script injected into proxied pages.

The script posts messages to ``window.parent``; see ``protocol.py`` for the
host-side model of the same vocabulary.
"""

from ..constants import BODY_LIMIT, PAYLOAD_LIMIT

MONITOR_SCRIPT = """
(function() {
    if (window.__pagescopeInstalled) return;
    window.__pagescopeInstalled = true;

    var BODY_LIMIT = %(body_limit)d;
    var PAYLOAD_LIMIT = %(payload_limit)d;
    var pending = {};

    function post(msg) {
        try { window.parent.postMessage(msg, '*'); } catch (e) {}
    }

    function newId() {
        var id;
        do {
            id = Math.random().toString(36).substr(2, 9);
        } while (pending[id]);
        pending[id] = true;
        return id;
    }

    function settle(id) {
        delete pending[id];
    }

    function serialize(a) {
        try {
            if (a === null) return 'null';
            if (a === undefined) return 'undefined';
            if (typeof a === 'object') return JSON.stringify(a, null, 2);
            return String(a);
        } catch (e) {
            return '[object]';
        }
    }

    function absolute(u) {
        try { return new URL(String(u), location.href).href; } catch (e) { return String(u); }
    }

    function byteLength(text) {
        try { return new TextEncoder().encode(text).length; } catch (e) { return text.length; }
    }

    function payloadOf(body) {
        if (body === undefined || body === null) return null;
        if (typeof body !== 'string') {
            try { body = String(body); } catch (e) { return null; }
        }
        return body.substring(0, PAYLOAD_LIMIT);
    }

    // === CONSOLE ===
    ['log', 'info', 'warn', 'error', 'debug'].forEach(function(level) {
        var original = console[level] ? console[level].bind(console) : function() {};
        console[level] = function() {
            post({
                type: 'console',
                level: level,
                data: Array.prototype.map.call(arguments, serialize),
                timestamp: Date.now()
            });
            original.apply(console, arguments);
        };
    });

    window.onerror = function(msg, url, line) {
        post({
            type: 'console',
            level: 'error',
            data: ['Uncaught: ' + msg + ' at ' + url + ':' + line],
            timestamp: Date.now()
        });
    };

    // === FETCH ===
    var _fetch = window.fetch;
    if (_fetch) {
        window.fetch = function(input, opts) {
            var t0 = performance.now();
            var id = newId();
            var method = (opts && opts.method) || (input && input.method) || 'GET';
            var target = (input && input.url) ? input.url : input;
            post({
                type: 'network', action: 'start', id: id,
                method: String(method).toUpperCase(), url: absolute(target),
                payload: payloadOf(opts && opts.body), timestamp: Date.now()
            });

            return _fetch.apply(this, arguments).then(function(res) {
                var duration = Math.round(performance.now() - t0);
                var headers = {};
                try { res.headers.forEach(function(v, k) { headers[k] = v; }); } catch (e) {}
                res.clone().text().then(function(body) {
                    settle(id);
                    post({
                        type: 'network', action: 'complete', id: id,
                        status: res.status, statusText: res.statusText,
                        duration: duration, size: byteLength(body),
                        headers: headers, body: body.substring(0, BODY_LIMIT)
                    });
                }).catch(function(err) {
                    settle(id);
                    post({ type: 'network', action: 'error', id: id, error: String(err && err.message || err) });
                });
                return res;
            }, function(err) {
                settle(id);
                post({ type: 'network', action: 'error', id: id, error: String(err && err.message || err) });
                throw err;
            });
        };
    }

    // === XHR ===
    var _XHR = window.XMLHttpRequest;
    if (_XHR) {
        var parseHeaders = function(raw) {
            var headers = {};
            (raw || '').trim().split(/[\\r\\n]+/).forEach(function(line) {
                var idx = line.indexOf(': ');
                if (idx > 0) headers[line.substring(0, idx).toLowerCase()] = line.substring(idx + 2);
            });
            return headers;
        };

        window.XMLHttpRequest = function() {
            var xhr = new _XHR();
            var id = null, method = 'GET', reqUrl = '', t0 = 0;

            var _open = xhr.open;
            xhr.open = function(m, u) {
                method = String(m || 'GET').toUpperCase();
                reqUrl = absolute(u);
                return _open.apply(xhr, arguments);
            };

            var _send = xhr.send;
            xhr.send = function(body) {
                id = newId();
                t0 = performance.now();
                post({
                    type: 'network', action: 'start', id: id,
                    method: method, url: reqUrl,
                    payload: payloadOf(body), timestamp: Date.now()
                });

                xhr.addEventListener('load', function() {
                    var text = '';
                    try { text = xhr.responseText || ''; } catch (e) {}
                    settle(id);
                    post({
                        type: 'network', action: 'complete', id: id,
                        status: xhr.status, statusText: xhr.statusText,
                        duration: Math.round(performance.now() - t0),
                        size: byteLength(text),
                        headers: parseHeaders(xhr.getAllResponseHeaders()),
                        body: text.substring(0, BODY_LIMIT)
                    });
                });
                ['error', 'abort', 'timeout'].forEach(function(kind) {
                    xhr.addEventListener(kind, function() {
                        settle(id);
                        post({ type: 'network', action: 'error', id: id, error: 'Request failed' });
                    });
                });

                return _send.apply(xhr, arguments);
            };

            return xhr;
        };
        window.XMLHttpRequest.prototype = _XHR.prototype;
        ['UNSENT', 'OPENED', 'HEADERS_RECEIVED', 'LOADING', 'DONE'].forEach(function(name) {
            window.XMLHttpRequest[name] = _XHR[name];
        });
    }

    post({ type: 'injected' });

    if (document.readyState === 'loading') {
        document.addEventListener('DOMContentLoaded', function() { post({ type: 'domready' }); });
    } else {
        post({ type: 'domready' });
    }
})();
""" % {"body_limit": BODY_LIMIT, "payload_limit": PAYLOAD_LIMIT}

MONITOR_SCRIPT_TAG = "<script>" + MONITOR_SCRIPT + "</script>"
